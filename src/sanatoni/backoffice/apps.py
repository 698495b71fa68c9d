"""Back office app configuration."""

from django.apps import AppConfig


class BackofficeConfig(AppConfig):
    """Admin and manager pages for orders, catalog, promotions, users and content."""

    name = "sanatoni.backoffice"
    label = "backoffice"
    verbose_name = "Back office"
    default_auto_field = "django.db.models.BigAutoField"
