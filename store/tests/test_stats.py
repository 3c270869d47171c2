from decimal import Decimal

import pytest

from store.models import CartItem, Product, Stats, User
from store.orders import place_order

# Observers run on commit, so these need real transactions.
# Every assertion reads the stored row, never the recomputing endpoint.
pytestmark = pytest.mark.django_db(transaction=True)


def stored():
    return Stats.objects.get(pk=1)


def test_registration_updates_customer_count(api):
    api.post('/api/auth/register', {'email': 'first@shop.com', 'password': 'secret1', 'name': 'First'})
    assert stored().total_customers == 1

    api.post('/api/auth/register', {'email': 'second@shop.com', 'password': 'secret1', 'name': 'Second'})
    assert stored().total_customers == 2


def test_promotion_to_admin_drops_customer_count(api, customer):
    assert stored().total_customers == 1

    api.post('/api/auth/become-admin', user=customer)

    assert stored().total_customers == 0


def test_product_create_and_delete_update_product_count(api, shop_admin):
    response = api.post('/api/admin/products', {'name': 'Lamp', 'price': '20', 'stock': 3}, user=shop_admin)
    assert stored().total_products == 1

    api.delete(f"/api/admin/products/{response.json()['id']}", user=shop_admin)
    assert stored().total_products == 0


def test_status_change_updates_revenue(api, shop_admin, customer, product):
    CartItem.objects.create(user=customer, product=product, quantity=2)
    order = place_order(customer.pk)
    assert stored().total_orders == 1
    assert stored().total_revenue == Decimal('20.00')

    api.put(f'/api/admin/orders/{order.pk}/status', {'status': 'Canceled'}, user=shop_admin)
    assert stored().total_revenue == Decimal('0.00')

    api.put(f'/api/admin/orders/{order.pk}/status', {'status': 'Delivered'}, user=shop_admin)
    assert stored().total_revenue == Decimal('20.00')


def test_failed_order_leaves_stored_stats_alone(api, customer, product):
    before = stored().total_orders
    CartItem.objects.create(user=customer, product=product, quantity=product.stock + 1)

    assert api.post('/api/orders', user=customer).status_code == 400
    assert stored().total_orders == before


def test_stored_row_matches_source_tables(customer, make_product):
    make_product(name='A')
    make_product(name='B')
    User.objects.create_user('c@shop.com', 'secret1', name='C')

    row = stored()
    assert row.total_products == Product.objects.count() == 2
    assert row.total_customers == 2
