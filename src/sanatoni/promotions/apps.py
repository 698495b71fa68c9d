"""Promotions app configuration."""

from django.apps import AppConfig


class PromotionsConfig(AppConfig):
    """Configuration for flash sales and coupons."""

    name = "sanatoni.promotions"
    label = "promotions"
    verbose_name = "Promotions"
    default_auto_field = "django.db.models.BigAutoField"
