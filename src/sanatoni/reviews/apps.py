"""Product reviews app configuration."""

from django.apps import AppConfig


class ReviewsConfig(AppConfig):
    """Configuration for customer product reviews and helpful votes."""

    name = "sanatoni.reviews"
    label = "reviews"
    verbose_name = "Product Reviews"
    default_auto_field = "django.db.models.BigAutoField"
