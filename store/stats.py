import logging
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db.models import DecimalField, Sum, Value
from django.db.models.functions import Coalesce

from .models import Order, OrderStatus, Product, Stats

logger = logging.getLogger(__name__)

STATS_ROW_ID = 1


def recompute_stats():
    """
    Recompute the dashboard counters from the source tables and upsert the
    single stats row. Returns the counters as a plain dict.
    """
    User = get_user_model()

    revenue = Order.objects.exclude(status=OrderStatus.CANCELED).aggregate(
        total=Coalesce(
            Sum('total_amount'),
            Value(Decimal('0.00')),
            output_field=DecimalField(max_digits=12, decimal_places=2),
        )
    )['total']

    data = {
        'total_products': Product.objects.count(),
        'total_orders': Order.objects.count(),
        'total_customers': User.objects.filter(is_admin=False).count(),
        'total_revenue': Decimal(revenue).quantize(Decimal('0.01')),
    }

    Stats.objects.update_or_create(pk=STATS_ROW_ID, defaults=data)
    return data


def refresh_stats():
    """Fire-and-forget variant: a failure is logged, never raised."""
    try:
        recompute_stats()
    except Exception:
        logger.exception("Stats recompute failed")
