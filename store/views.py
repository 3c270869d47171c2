import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Q
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from .decorators import admin_required, token_required
from .exceptions import AuthError, ConflictError, InsufficientStock, NotFoundError
from .models import CartItem, Product
from .orders import orders_with_items, place_order, set_order_status
from .stats import recompute_stats
from .store_utils import (
    cart_line_to_dict,
    get_cart_count,
    order_to_dict,
    product_to_dict,
    user_to_dict,
)
from .tokens import issue_token
from .validation import (
    parse_json_body,
    validate_cart_item,
    validate_product_data,
    validate_quantity,
    validate_user_login,
    validate_user_registration,
)

logger = logging.getLogger(__name__)

User = get_user_model()


@require_GET
def health(request):
    return JsonResponse({'status': 'OK', 'message': 'E-commerce API is running'})


# -------------------------------
# AUTH
# -------------------------------
@require_POST
def register(request):
    data = validate_user_registration(parse_json_body(request))

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=data['email'],
                password=data['password'],
                name=data['name'],
            )
    except IntegrityError:
        raise ConflictError("Email already exists")

    logger.info("Registered user %s", user.pk)
    return JsonResponse({'user': user_to_dict(user), 'token': issue_token(user)}, status=201)


@require_POST
def login(request):
    data = validate_user_login(parse_json_body(request))

    user = User.objects.filter(email=data['email']).first()
    if user is None or not user.check_password(data['password']):
        raise AuthError("Invalid credentials")

    return JsonResponse({'user': user_to_dict(user), 'token': issue_token(user)})


@require_POST
@token_required
def become_admin(request):
    user = User.objects.filter(pk=request.claims.user_id).first()
    if user is None:
        raise NotFoundError("User not found")

    user.is_admin = True
    user.save(update_fields=['is_admin'])
    logger.info("User %s promoted to admin", user.pk)

    # Old tokens keep the old role, hand out a fresh one
    return JsonResponse({'user': user_to_dict(user), 'token': issue_token(user)})


# -------------------------------
# CATALOG
# -------------------------------
@require_GET
def product_list(request):
    products = Product.objects.all()
    return JsonResponse([product_to_dict(p) for p in products], safe=False)


@require_GET
def product_detail(request, pk):
    product = Product.objects.filter(pk=pk).first()
    if product is None:
        raise NotFoundError("Product not found")
    return JsonResponse(product_to_dict(product))


@require_GET
def product_search(request, query):
    products = Product.objects.filter(
        Q(name__icontains=query) | Q(description__icontains=query)
    )
    return JsonResponse([product_to_dict(p) for p in products], safe=False)


# -------------------------------
# CART SYSTEM
# -------------------------------
@require_http_methods(['GET', 'POST', 'DELETE'])
@token_required
def cart(request):
    user_id = request.claims.user_id

    if request.method == 'POST':
        return add_to_cart(request, user_id)

    if request.method == 'DELETE':
        CartItem.objects.filter(user_id=user_id).delete()
        return JsonResponse({'message': 'Cart cleared'})

    lines = CartItem.objects.select_related('product').filter(user_id=user_id)
    return JsonResponse([cart_line_to_dict(line) for line in lines], safe=False)


def add_to_cart(request, user_id):
    data = validate_cart_item(parse_json_body(request))

    with transaction.atomic():
        product = Product.objects.select_for_update().filter(pk=data['product_id']).first()
        if product is None:
            raise NotFoundError("Product not found")

        # One line per (user, product): adding again merges quantities
        line = CartItem.objects.select_for_update().filter(user_id=user_id, product=product).first()
        quantity = data['quantity'] + (line.quantity if line else 0)
        if quantity > product.stock:
            raise InsufficientStock(product.pk)

        if line:
            line.quantity = quantity
            line.save(update_fields=['quantity'])
        else:
            line = CartItem.objects.create(user_id=user_id, product=product, quantity=quantity)

    payload = cart_line_to_dict(line)
    payload['cart_count'] = get_cart_count(user_id)
    return JsonResponse(payload, status=201)


@require_http_methods(['PUT', 'DELETE'])
@token_required
def cart_item(request, pk):
    user_id = request.claims.user_id

    if request.method == 'DELETE':
        deleted, _ = CartItem.objects.filter(pk=pk, user_id=user_id).delete()
        if not deleted:
            raise NotFoundError("Cart item not found")
        return JsonResponse({'message': 'Item removed from cart'})

    quantity = validate_quantity(parse_json_body(request).get('quantity'))

    with transaction.atomic():
        line = (CartItem.objects.select_for_update()
                .select_related('product')
                .filter(pk=pk, user_id=user_id)
                .first())
        if line is None:
            raise NotFoundError("Cart item not found")
        if quantity > line.product.stock:
            raise InsufficientStock(line.product_id)
        line.quantity = quantity
        line.save(update_fields=['quantity'])

    return JsonResponse(cart_line_to_dict(line))


# -------------------------------
# ORDERS
# -------------------------------
@require_http_methods(['GET', 'POST'])
@token_required
def orders(request):
    user_id = request.claims.user_id

    if request.method == 'POST':
        order = place_order(user_id)
        return JsonResponse(order_to_dict(order), status=201)

    user_orders = orders_with_items().filter(user_id=user_id)
    return JsonResponse([order_to_dict(o) for o in user_orders], safe=False)


@require_GET
@token_required
def order_detail(request, pk):
    order = orders_with_items().filter(pk=pk, user_id=request.claims.user_id).first()
    if order is None:
        raise NotFoundError("Order not found")
    return JsonResponse(order_to_dict(order))


# -------------------------------
# ADMIN
# -------------------------------
@require_POST
@admin_required
def admin_products(request):
    data = validate_product_data(parse_json_body(request))
    product = Product.objects.create(**data)
    logger.info("Product %s created", product.pk)
    return JsonResponse(product_to_dict(product), status=201)


@require_http_methods(['PUT', 'DELETE'])
@admin_required
def admin_product_detail(request, pk):
    if request.method == 'DELETE':
        product = Product.objects.filter(pk=pk).first()
        if product is None:
            raise NotFoundError("Product not found")
        product.delete()
        logger.info("Product %s deleted", pk)
        return JsonResponse({'message': 'Product deleted successfully'})

    data = validate_product_data(parse_json_body(request))
    product = Product.objects.filter(pk=pk).first()
    if product is None:
        raise NotFoundError("Product not found")
    for field, value in data.items():
        setattr(product, field, value)
    product.save()
    return JsonResponse(product_to_dict(product))


@require_GET
@admin_required
def admin_orders(request):
    all_orders = orders_with_items().select_related('user')
    return JsonResponse([order_to_dict(o, include_customer=True) for o in all_orders], safe=False)


@require_http_methods(['PUT'])
@admin_required
def admin_order_status(request, pk):
    status = parse_json_body(request).get('status')
    set_order_status(pk, status)
    order = orders_with_items().get(pk=pk)
    return JsonResponse(order_to_dict(order))


@require_GET
@admin_required
def admin_stats(request):
    # The stored row is a cache, always recompute on read
    return JsonResponse(recompute_stats())
