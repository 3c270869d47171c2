from decimal import Decimal

import pytest

from store.exceptions import InvalidStatus, ValidationError
from store.validation import (
    sanitize_string,
    validate_cart_item,
    validate_email,
    validate_order_status,
    validate_password,
    validate_positive_integer,
    validate_positive_number,
    validate_product_data,
    validate_required,
    validate_user_login,
    validate_user_registration,
)


def test_sanitize_string_strips_script_blocks_and_tags():
    dirty = '  <b>Nice</b> mug<script>alert("x")</script>  '
    assert sanitize_string(dirty) == 'Nice mug'


def test_sanitize_string_rejects_overlong_input():
    with pytest.raises(ValidationError, match='maximum length of 5'):
        sanitize_string('abcdef', 5)


def test_sanitize_string_requires_a_string():
    with pytest.raises(ValidationError, match='must be a string'):
        sanitize_string(42)


@pytest.mark.parametrize('raw, expected', [
    ('A@B.com', 'a@b.com'),
    ('  user.name@shop.co.uk ', 'user.name@shop.co.uk'),
])
def test_validate_email_normalizes(raw, expected):
    assert validate_email(raw) == expected


@pytest.mark.parametrize('raw', ['plain', 'a@b', 'a@b.c', 'a b@c.com', None])
def test_validate_email_rejects_bad_shapes(raw):
    with pytest.raises(ValidationError, match='Invalid email format'):
        validate_email(raw)


def test_validate_positive_number():
    assert validate_positive_number('10.5', 'Price') == Decimal('10.5')
    assert validate_positive_number(0, 'Price') == Decimal('0')
    for bad in (-1, 'abc', 'NaN', 'Infinity', True, None):
        with pytest.raises(ValidationError, match='Price must be a positive number'):
            validate_positive_number(bad, 'Price')


def test_validate_positive_integer():
    assert validate_positive_integer('7', 'Stock') == 7
    assert validate_positive_integer(3.0, 'Stock') == 3
    for bad in (-2, 2.5, '2.5', 'x', False, None):
        with pytest.raises(ValidationError, match='Stock must be a positive integer'):
            validate_positive_integer(bad, 'Stock')


def test_validate_required():
    assert validate_required(0, 'Qty') == 0
    for empty in (None, ''):
        with pytest.raises(ValidationError, match='Qty is required'):
            validate_required(empty, 'Qty')


def test_validate_password_length():
    assert validate_password('secret') == 'secret'
    with pytest.raises(ValidationError, match='at least 6'):
        validate_password('short')


def test_product_data_is_normalized():
    data = validate_product_data({
        'name': ' <i>Mug</i> ',
        'price': '10',
        'stock': '5',
        'category': 'Kitchen',
    })
    assert data == {
        'name': 'Mug',
        'description': '',
        'price': Decimal('10.00'),
        'stock': 5,
        'category': 'Kitchen',
        'image_url': None,
    }


def test_product_data_stops_at_first_bad_field():
    with pytest.raises(ValidationError) as exc:
        validate_product_data({'name': 'Mug', 'price': -1, 'stock': -1})
    assert exc.value.message == 'Price must be a positive number'


def test_product_name_made_only_of_markup_is_required():
    with pytest.raises(ValidationError, match='Product name is required'):
        validate_product_data({'name': '<b></b>', 'price': 1, 'stock': 1})


def test_product_price_must_fit_the_column():
    with pytest.raises(ValidationError, match='must not exceed'):
        validate_product_data({'name': 'Yacht', 'price': '100000000', 'stock': 1})


def test_product_stock_must_fit_the_column():
    assert validate_product_data({'name': 'Bolt', 'price': 1, 'stock': 2147483647})['stock'] == 2147483647
    with pytest.raises(ValidationError, match='Stock must not exceed 2147483647'):
        validate_product_data({'name': 'Bolt', 'price': 1, 'stock': 10 ** 20})


def test_cart_item_ids_and_quantities_are_bounded():
    with pytest.raises(ValidationError, match='Product ID must not exceed'):
        validate_cart_item({'product_id': 10 ** 20, 'quantity': 1})
    with pytest.raises(ValidationError, match='Quantity must not exceed'):
        validate_cart_item({'product_id': 1, 'quantity': '99999999999'})


def test_registration_checks_password_strength():
    with pytest.raises(ValidationError, match='at least 6'):
        validate_user_registration({'name': 'A', 'email': 'a@b.com', 'password': '123'})


def test_login_does_not_check_password_strength():
    data = validate_user_login({'email': 'A@B.com', 'password': '1'})
    assert data == {'email': 'a@b.com', 'password': '1'}


def test_cart_item_requires_positive_quantity():
    assert validate_cart_item({'product_id': '3', 'quantity': 2}) == {'product_id': 3, 'quantity': 2}
    with pytest.raises(ValidationError, match='Quantity must be at least 1'):
        validate_cart_item({'product_id': 3, 'quantity': 0})


def test_order_status_must_be_a_known_literal():
    assert validate_order_status('Payment Received') == 'Payment Received'
    for bad in ('NotAStatus', 'pending', None):
        with pytest.raises(InvalidStatus):
            validate_order_status(bad)
