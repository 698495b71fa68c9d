"""Content app configuration."""

from django.apps import AppConfig


class ContentConfig(AppConfig):
    """Configuration for the blog, CMS pages, media library and SEO."""

    name = "sanatoni.content"
    label = "content"
    verbose_name = "Content"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        from sanatoni.localization.content import register_localizable

        from .models import BlogCategory, BlogPost, Page

        register_localizable(BlogCategory)
        register_localizable(BlogPost)
        register_localizable(Page)
