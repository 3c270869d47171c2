"""
Observer hooks that keep the stats row in step with the source tables.

Recomputation is deferred with ``transaction.on_commit``: it runs only once
the triggering change is committed and is dropped if that transaction rolls
back.
"""
from django.conf import settings
from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import Order, Product
from .stats import refresh_stats


def schedule_stats_refresh():
    transaction.on_commit(refresh_stats)


@receiver(post_save, sender=Product, dispatch_uid='store_stats_product_saved')
def product_saved(sender, instance, created, **kwargs):
    if created:
        schedule_stats_refresh()


@receiver(post_delete, sender=Product, dispatch_uid='store_stats_product_deleted')
def product_deleted(sender, instance, **kwargs):
    schedule_stats_refresh()


@receiver(post_save, sender=Order, dispatch_uid='store_stats_order_saved')
def order_saved(sender, instance, **kwargs):
    schedule_stats_refresh()


@receiver(post_delete, sender=Order, dispatch_uid='store_stats_order_deleted')
def order_deleted(sender, instance, **kwargs):
    schedule_stats_refresh()


@receiver(post_save, sender=settings.AUTH_USER_MODEL, dispatch_uid='store_stats_user_saved')
def user_saved(sender, instance, **kwargs):
    schedule_stats_refresh()


@receiver(post_delete, sender=settings.AUTH_USER_MODEL, dispatch_uid='store_stats_user_deleted')
def user_deleted(sender, instance, **kwargs):
    schedule_stats_refresh()
