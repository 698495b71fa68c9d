"""Shared page props for the active locale."""

from django.utils import translation

from . import conf
from .services import TranslationService
from .utils import available_locales, locale_direction


def locale_props(request):
    locale = getattr(request, "LANGUAGE_CODE", None) or translation.get_language()
    return {
        "locale": locale,
        "direction": locale_direction(locale),
        "translations": TranslationService().get_all_grouped(locale),
        "available_languages": available_locales(),
        "supported_locales": conf.get_supported_locales(),
    }
