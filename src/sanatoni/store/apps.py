"""Store app configuration."""

from django.apps import AppConfig


class StoreConfig(AppConfig):
    """Configuration for carts, checkout, orders and wishlists."""

    name = "sanatoni.store"
    label = "store"
    verbose_name = "Store"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        from . import signals  # noqa: F401
