from django.urls import path
from . import views

urlpatterns = [
    path('health', views.health, name='health'),

    path('auth/register', views.register, name='register'),
    path('auth/login', views.login, name='login'),
    path('auth/become-admin', views.become_admin, name='become_admin'),

    path('products', views.product_list, name='products'),
    path('products/search/<str:query>', views.product_search, name='product_search'),
    path('products/<int:pk>', views.product_detail, name='product_detail'),

    path('cart', views.cart, name='cart'),
    path('cart/<int:pk>', views.cart_item, name='cart_item'),

    path('orders', views.orders, name='orders'),
    path('orders/<int:pk>', views.order_detail, name='order_detail'),

    path('admin/products', views.admin_products, name='admin_products'),
    path('admin/products/<int:pk>', views.admin_product_detail, name='admin_product_detail'),
    path('admin/orders', views.admin_orders, name='admin_orders'),
    path('admin/orders/<int:pk>/status', views.admin_order_status, name='admin_order_status'),
    path('admin/stats', views.admin_stats, name='admin_stats'),
]
