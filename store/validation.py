"""
Input validation and sanitization.

Every mutating view passes untrusted payload fields through these helpers
before touching the ORM. Each helper returns a normalized value or raises
``store.exceptions.ValidationError`` with a message that is safe to show to
the client. Composite validators stop at the first failing field.
"""
import json
import re
from decimal import Decimal, InvalidOperation

from .exceptions import InvalidStatus, ValidationError
from .models import OrderStatus

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]{2,}$')
SCRIPT_RE = re.compile(r'<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>', re.IGNORECASE)
TAG_RE = re.compile(r'<[^>]*>')

MIN_PASSWORD_LENGTH = 6
# DecimalField(max_digits=10, decimal_places=2)
MAX_PRICE = Decimal('99999999.99')
# PositiveIntegerField, 32-bit on PostgreSQL
MAX_INTEGER = 2147483647


def sanitize_string(value, max_length=1000):
    if not isinstance(value, str):
        raise ValidationError("Input must be a string")

    sanitized = value.strip()
    if len(sanitized) > max_length:
        raise ValidationError(f"Input exceeds maximum length of {max_length} characters")

    # Blocklist only, formatting is not preserved
    sanitized = SCRIPT_RE.sub('', sanitized)
    sanitized = TAG_RE.sub('', sanitized)
    return sanitized.strip()


def validate_email(value):
    if not isinstance(value, str):
        raise ValidationError("Invalid email format")
    email = value.strip()
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email format")
    return email.lower()


def validate_positive_number(value, field_name='value'):
    message = f"{field_name} must be a positive number"
    if isinstance(value, bool) or value is None:
        raise ValidationError(message)
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(message)
    if not number.is_finite() or number < 0:
        raise ValidationError(message)
    return number


def validate_positive_integer(value, field_name='value', max_value=MAX_INTEGER):
    message = f"{field_name} must be a positive integer"
    if isinstance(value, bool) or value is None:
        raise ValidationError(message)
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(message)
        number = int(value)
    elif isinstance(value, str) and re.fullmatch(r'\s*\d+\s*', value):
        number = int(value)
    else:
        raise ValidationError(message)
    if number < 0:
        raise ValidationError(message)
    if number > max_value:
        raise ValidationError(f"{field_name} must not exceed {max_value}")
    return number


def validate_required(value, field_name='field'):
    if value is None or value == '':
        raise ValidationError(f"{field_name} is required")
    return value


def validate_password(value):
    if not isinstance(value, str) or len(value) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    return value


# ------------------------------
# COMPOSITE VALIDATORS
# ------------------------------
def validate_product_data(data):
    validated = {}

    validate_required(data.get('name'), 'Product name')
    validated['name'] = validate_required(sanitize_string(data['name'], 200), 'Product name')
    validated['description'] = sanitize_string(data.get('description') or '', 2000)

    price = validate_positive_number(data.get('price'), 'Price')
    if price > MAX_PRICE:
        raise ValidationError(f"Price must not exceed {MAX_PRICE}")
    validated['price'] = price.quantize(Decimal('0.01'))

    validated['stock'] = validate_positive_integer(data.get('stock'), 'Stock')
    validated['category'] = sanitize_string(data['category'], 100) if data.get('category') else None
    validated['image_url'] = sanitize_string(data['image_url'], 500) if data.get('image_url') else None

    return validated


def validate_user_registration(data):
    validated = {}

    validate_required(data.get('name'), 'Name')
    validated['name'] = validate_required(sanitize_string(data['name'], 100), 'Name')
    validated['email'] = validate_email(validate_required(data.get('email'), 'Email'))
    validated['password'] = validate_password(validate_required(data.get('password'), 'Password'))

    return validated


def validate_user_login(data):
    validated = {}

    validated['email'] = validate_email(validate_required(data.get('email'), 'Email'))
    # No strength rule at login
    validated['password'] = validate_required(data.get('password'), 'Password')

    return validated


def validate_quantity(value):
    quantity = validate_positive_integer(value, 'Quantity')
    if quantity < 1:
        raise ValidationError("Quantity must be at least 1")
    return quantity


def validate_cart_item(data):
    validated = {}

    validated['product_id'] = validate_positive_integer(data.get('product_id'), 'Product ID')
    validated['quantity'] = validate_quantity(data.get('quantity'))

    return validated


def validate_order_status(value):
    if value not in OrderStatus.values:
        raise InvalidStatus()
    return value


def parse_json_body(request):
    """Decode a JSON object body; an empty body decodes to ``{}``."""
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        raise ValidationError("Invalid JSON body")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
