# store/store_utils.py
from django.db.models import Sum

from .models import CartItem


def get_cart_count(user_id):
    """
    Returns the total item count in the user's cart.
    """
    return CartItem.objects.filter(user_id=user_id).aggregate(n=Sum('quantity'))['n'] or 0


def user_to_dict(user):
    # Never includes the password hash
    return {
        'id': user.pk,
        'email': user.email,
        'name': user.name,
        'is_admin': user.is_admin,
        'role': user.role.value,
    }


def product_to_dict(product):
    return {
        'id': product.pk,
        'name': product.name,
        'description': product.description,
        'price': product.price,
        'stock': product.stock,
        'image_url': product.image_url,
        'category': product.category,
        'created_at': product.created_at,
    }


def cart_line_to_dict(line):
    product = line.product
    return {
        'id': line.pk,
        'quantity': line.quantity,
        'product_id': line.product_id,
        'name': product.name,
        'price': product.price,
        'image_url': product.image_url,
        'stock': product.stock,
    }


def order_item_to_dict(item):
    product = item.product
    return {
        'product_id': item.product_id,
        'quantity': item.quantity,
        'price': item.price,
        'name': product.name if product else None,
        'image_url': product.image_url if product else None,
    }


def order_to_dict(order, include_customer=False):
    data = {
        'id': order.pk,
        'user_id': order.user_id,
        'total_amount': order.total_amount,
        'status': order.status,
        'created_at': order.created_at,
        'updated_at': order.updated_at,
        'items': [order_item_to_dict(item) for item in order.items.all()],
    }
    if include_customer:
        user = order.user
        data['email'] = user.email if user else None
        data['customer_name'] = user.name if user else None
    return data
