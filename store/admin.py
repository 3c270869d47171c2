from django.contrib import admin, messages

from .exceptions import StoreError
from .models import Order, OrderItem, OrderStatus, Product, Stats, User
from .orders import set_order_status
from .stats import recompute_stats


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'price', 'stock', 'category', 'created_at')
    list_filter = ('category',)
    search_fields = ('name', 'description')


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('id', 'email', 'name', 'is_admin', 'created_at')
    list_filter = ('is_admin',)
    search_fields = ('email', 'name')
    exclude = ('password',)


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ('product', 'quantity', 'price')
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'total_amount', 'status', 'created_at', 'updated_at')
    list_filter = ('status', 'created_at')
    search_fields = ('user__email', 'user__name', 'id')
    readonly_fields = ('user', 'total_amount', 'created_at', 'updated_at')
    inlines = [OrderItemInline]

    actions = ['mark_as_confirmed', 'mark_as_payment_received', 'mark_as_delivered', 'mark_as_canceled']

    def _transition(self, request, queryset, status):
        # One by one so every change goes through the status rules and stats hooks
        changed = 0
        for order in queryset:
            try:
                set_order_status(order.pk, status)
                changed += 1
            except StoreError as e:
                self.message_user(request, f"Order #{order.pk}: {e.message}", messages.ERROR)
        self.message_user(request, f"{changed} order(s) marked as {status}.")

    @admin.action(description="Mark as Confirmed")
    def mark_as_confirmed(self, request, queryset):
        self._transition(request, queryset, OrderStatus.CONFIRMED)

    @admin.action(description="Mark as Payment Received")
    def mark_as_payment_received(self, request, queryset):
        self._transition(request, queryset, OrderStatus.PAYMENT_RECEIVED)

    @admin.action(description="Mark as Delivered")
    def mark_as_delivered(self, request, queryset):
        self._transition(request, queryset, OrderStatus.DELIVERED)

    @admin.action(description="Mark as Canceled")
    def mark_as_canceled(self, request, queryset):
        self._transition(request, queryset, OrderStatus.CANCELED)


@admin.register(Stats)
class StatsAdmin(admin.ModelAdmin):
    list_display = ('total_products', 'total_orders', 'total_customers', 'total_revenue', 'updated_at')
    actions = ['recompute']

    @admin.action(description="Recompute from source tables")
    def recompute(self, request, queryset):
        recompute_stats()
        self.message_user(request, "Stats recomputed.")
