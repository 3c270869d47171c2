import json
from decimal import Decimal

import pytest

from store.models import Product, User
from store.tokens import issue_token


class Api:
    """Thin JSON wrapper over the Django test client."""

    def __init__(self, client):
        self.client = client

    def _headers(self, user=None, token=None):
        if user is not None:
            token = issue_token(user)
        return {'HTTP_AUTHORIZATION': f'Bearer {token}'} if token else {}

    def get(self, path, user=None, token=None):
        return self.client.get(path, **self._headers(user, token))

    def _send(self, method, path, data, user, token):
        body = json.dumps(data) if data is not None else ''
        return getattr(self.client, method)(
            path, data=body, content_type='application/json', **self._headers(user, token)
        )

    def post(self, path, data=None, user=None, token=None):
        return self._send('post', path, data, user, token)

    def put(self, path, data=None, user=None, token=None):
        return self._send('put', path, data, user, token)

    def delete(self, path, data=None, user=None, token=None):
        return self._send('delete', path, data, user, token)


@pytest.fixture(autouse=True)
def sync_order_emails(settings):
    settings.ORDER_EMAIL_ASYNC = False
    settings.EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'


@pytest.fixture
def api(client):
    return Api(client)


@pytest.fixture
def customer(db):
    return User.objects.create_user('a@b.com', 'secret1', name='Alice')


@pytest.fixture
def other_customer(db):
    return User.objects.create_user('bob@example.com', 'secret1', name='Bob')


@pytest.fixture
def shop_admin(db):
    return User.objects.create_user('boss@shop.com', 'secret1', name='Boss', is_admin=True)


@pytest.fixture
def product(db):
    return Product.objects.create(
        name='Mug', description='Ceramic coffee mug', price=Decimal('10.00'), stock=5
    )


@pytest.fixture
def make_product(db):
    def make(name='Thing', price='1.00', stock=10, **extra):
        return Product.objects.create(name=name, price=Decimal(price), stock=stock, **extra)
    return make
