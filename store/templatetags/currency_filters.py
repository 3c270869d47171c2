from decimal import Decimal, InvalidOperation

from django import template

register = template.Library()


@register.filter
def money(value):
    try:
        return str(Decimal(value).quantize(Decimal('0.01')))
    except (InvalidOperation, TypeError, ValueError):
        return "0.00"


@register.filter
def line_total(item):
    return money(item.price * item.quantity)
