"""Catalog app configuration."""

from django.apps import AppConfig


class CatalogConfig(AppConfig):
    """Configuration for categories and products."""

    name = "sanatoni.catalog"
    label = "catalog"
    verbose_name = "Catalog"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        from sanatoni.localization.content import register_localizable

        from .models import Category, Product

        register_localizable(Category)
        register_localizable(Product)
