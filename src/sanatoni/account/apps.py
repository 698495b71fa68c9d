"""Customer account app configuration."""

from django.apps import AppConfig


class AccountConfig(AppConfig):
    """Configuration for the customer account area."""

    name = "sanatoni.account"
    label = "account"
    verbose_name = "Customer Account"
    default_auto_field = "django.db.models.BigAutoField"
