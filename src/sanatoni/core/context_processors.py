"""Context processors for Sanatoni core."""

from django.conf import settings
from django.utils import translation

from sanatoni.localization.utils import locale_direction


def storefront(request):
    """Add site branding and the active locale to templates."""
    locale = getattr(request, "LANGUAGE_CODE", None) or translation.get_language()
    return {
        "site_name": settings.SITE_NAME,
        "site_url": settings.SITE_URL,
        "locale": locale,
        "text_direction": locale_direction(locale),
    }
