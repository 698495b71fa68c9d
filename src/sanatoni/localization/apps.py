"""Localization app configuration."""

from django.apps import AppConfig


class LocalizationConfig(AppConfig):
    """Configuration for locale detection and translations."""

    name = "sanatoni.localization"
    label = "localization"
    verbose_name = "Localization"
    default_auto_field = "django.db.models.BigAutoField"
