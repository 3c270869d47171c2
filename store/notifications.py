import logging
import threading

from anymail.message import AnymailMessage
from django.conf import settings
from django.db import transaction
from django.template.loader import render_to_string

from .models import Order

logger = logging.getLogger(__name__)


def schedule_order_confirmation(order_id):
    """Queue the confirmation email to go out once the order commits."""
    if not getattr(settings, "ORDER_CONFIRMATION_EMAILS", True):
        return
    transaction.on_commit(lambda: send_order_confirmation(order_id))


def build_order_confirmation(order):
    ctx = {
        "order": order,
        "items": list(order.items.select_related("product")),
        "name": order.user.name if order.user else "Customer",
        "site_url": getattr(settings, "STORE_SITE_URL", ""),
    }

    plain = render_to_string("store/emails/order_confirmation.txt", ctx)
    html = render_to_string("store/emails/order_confirmation.html", ctx)

    msg = AnymailMessage(
        subject=f"Order confirmation #{order.id}",
        body=plain,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[order.user.email],
    )
    msg.attach_alternative(html, "text/html")
    msg.tags = ["order-confirmation"]
    msg.metadata = {"order_id": str(order.id)}
    return msg


def _deliver(msg, order_id):
    try:
        msg.send()
        logger.info("Order confirmation sent for order %s", order_id)
    except Exception:
        logger.exception("Order confirmation send failed for order %s", order_id)


def send_order_confirmation(order_id):
    """
    Best effort: the message is built in the calling thread (it needs the
    DB), delivery happens on a daemon thread unless ORDER_EMAIL_ASYNC is off.
    Failures are logged, never raised.
    """
    try:
        order = Order.objects.select_related("user").get(pk=order_id)
        if not order.user or not order.user.email:
            return
        msg = build_order_confirmation(order)
    except Exception:
        logger.exception("Could not build order confirmation for order %s", order_id)
        return

    if getattr(settings, "ORDER_EMAIL_ASYNC", True):
        try:
            threading.Thread(target=_deliver, args=(msg, order_id), daemon=True).start()
        except Exception:
            logger.exception("Failed to start confirmation thread for order %s", order_id)
    else:
        _deliver(msg, order_id)
