"""
Order placement and status transitions.

``place_order`` turns a user's cart into an order in one database
transaction: the cart lines and their products are locked, stock is checked
for every line before anything is written, prices are read once and frozen
into the order items, stock is decremented and the cart drained. Any error
rolls the whole thing back. Stats and the confirmation email are only
triggered after commit.
"""
import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import F, Prefetch

from .exceptions import EmptyCart, InsufficientStock, NotFoundError, OrderTotalTooLarge
from .models import CartItem, Order, OrderItem, OrderStatus, Product
from .notifications import schedule_order_confirmation
from .validation import validate_order_status

logger = logging.getLogger(__name__)

# Order.total_amount is DecimalField(max_digits=10, decimal_places=2)
MAX_ORDER_TOTAL = Decimal('99999999.99')


def orders_with_items():
    return Order.objects.prefetch_related(
        Prefetch('items', queryset=OrderItem.objects.select_related('product'))
    )


def calculate_total(lines):
    total = Decimal('0.00')
    for line in lines:
        total += line.product.price * line.quantity
    return total.quantize(Decimal('0.01'))


def place_order(user_id):
    with transaction.atomic():
        # Lock in product order so concurrent checkouts can't deadlock
        lines = list(
            CartItem.objects.select_for_update()
            .select_related('product')
            .filter(user_id=user_id)
            .order_by('product_id')
        )

        if not lines:
            raise EmptyCart()

        for line in lines:
            if line.quantity > line.product.stock:
                raise InsufficientStock(line.product_id)

        # Prices are read once here and reused for the items
        total = calculate_total(lines)
        if total > MAX_ORDER_TOTAL:
            raise OrderTotalTooLarge()

        order = Order.objects.create(
            user_id=user_id,
            total_amount=total,
            status=OrderStatus.PENDING,
        )

        items = []
        for line in lines:
            updated = Product.objects.filter(
                pk=line.product_id,
                stock__gte=line.quantity,
            ).update(stock=F('stock') - line.quantity)
            if not updated:
                raise InsufficientStock(line.product_id)

            items.append(OrderItem(
                order=order,
                product_id=line.product_id,
                quantity=line.quantity,
                price=line.product.price,
            ))

        OrderItem.objects.bulk_create(items)
        CartItem.objects.filter(user_id=user_id).delete()

        schedule_order_confirmation(order.pk)

    logger.info("Order %s placed by user %s: %s line(s), total %s",
                order.pk, user_id, len(items), order.total_amount)
    return orders_with_items().get(pk=order.pk)


def set_order_status(order_id, status):
    status = validate_order_status(status)

    with transaction.atomic():
        order = Order.objects.select_for_update().filter(pk=order_id).first()
        if order is None:
            raise NotFoundError("Order not found")
        previous = order.status
        order.status = status
        order.save(update_fields=['status', 'updated_at'])

    logger.info("Order %s status %s -> %s", order.pk, previous, status)
    return order
