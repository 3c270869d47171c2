from decimal import Decimal

from django.contrib.auth.base_user import AbstractBaseUser, BaseUserManager
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Role(models.TextChoices):
    CUSTOMER = 'customer', 'Customer'
    ADMIN = 'admin', 'Admin'


# ------------------------------
# USER MODEL
# ------------------------------
class UserManager(BaseUserManager):

    def create_user(self, email, password=None, name='', **extra_fields):
        if not email:
            raise ValueError("Users must have an email address")
        user = self.model(email=email.strip().lower(), name=name, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, name='', **extra_fields):
        extra_fields['is_admin'] = True
        return self.create_user(email, password, name=name, **extra_fields)


class User(AbstractBaseUser):
    email = models.EmailField(max_length=255, unique=True)
    name = models.CharField(max_length=255)
    is_admin = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    def __str__(self):
        return self.email

    @property
    def role(self):
        return Role.ADMIN if self.is_admin else Role.CUSTOMER

    # Django admin site access
    @property
    def is_staff(self):
        return self.is_admin

    def has_perm(self, perm, obj=None):
        return self.is_admin

    def has_module_perms(self, app_label):
        return self.is_admin


# ------------------------------
# PRODUCT MODEL
# ------------------------------
class Product(models.Model):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    stock = models.PositiveIntegerField(default=0)
    image_url = models.CharField(max_length=500, null=True, blank=True)
    category = models.CharField(max_length=100, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return self.name


# ------------------------------
# CART MODEL
# ------------------------------
class CartItem(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='cart_items')
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='cart_items')
    quantity = models.PositiveIntegerField(default=1)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(fields=['user', 'product'], name='unique_cart_line'),
        ]

    def __str__(self):
        return f"{self.product_id} × {self.quantity}"


# ------------------------------
# ORDER MODEL
# ------------------------------
class OrderStatus(models.TextChoices):
    PENDING = 'Pending', 'Pending'
    CONFIRMED = 'Confirmed', 'Confirmed'
    PAYMENT_PENDING = 'Payment Pending', 'Payment pending'
    PAYMENT_RECEIVED = 'Payment Received', 'Payment received'
    DELIVERED = 'Delivered', 'Delivered'
    CANCELED = 'Canceled', 'Canceled'


class Order(models.Model):
    # Orders outlive their customer
    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders'
    )

    total_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00')
    )

    status = models.CharField(
        max_length=50,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Order #{self.id or 'unsaved'} - {self.status}"

    def get_total_price(self):
        total = Decimal('0.00')
        for item in self.items.all():
            total += item.price * item.quantity
        return total.quantize(Decimal('0.01'))


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    # History survives product deletion
    product = models.ForeignKey(
        Product,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_items'
    )
    quantity = models.PositiveIntegerField()
    price = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        ordering = ['id']

    def __str__(self):
        name = self.product.name if self.product else 'Deleted product'
        return f"{name} × {self.quantity}"


# ------------------------------
# STATS MODEL
# ------------------------------
class Stats(models.Model):
    """
    Denormalized dashboard counters. Always recomputed from the source
    tables, see ``store.stats.recompute_stats``.
    """
    total_products = models.PositiveIntegerField(default=0)
    total_orders = models.PositiveIntegerField(default=0)
    total_customers = models.PositiveIntegerField(default=0)
    total_revenue = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = 'stats'

    def __str__(self):
        return f"Stats #{self.pk}"
