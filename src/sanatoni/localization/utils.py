"""Locale helpers for views, templates and emails."""

from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP

from django.utils import dateformat, timezone, translation

from . import conf
from .services import TranslationService


def available_locales():
    """Supported locales with their display metadata."""
    return [
        {"code": code, **meta}
        for code, meta in conf.get_supported().items()
    ]


def set_locale(request, locale):
    """Activate ``locale`` for this request and remember it in the session."""
    if not conf.is_supported(locale):
        return False
    translation.activate(locale)
    request.LANGUAGE_CODE = locale
    if hasattr(request, "session"):
        request.session[conf.get_setting("SESSION_KEY")] = locale
    return True


def current_locale():
    return translation.get_language() or conf.get_default_locale()


def locale_name(locale=None, native=False):
    locale = locale or current_locale()
    meta = conf.get_supported().get(locale, {})
    key = "native_name" if native else "name"
    return meta.get(key, locale)


def is_rtl(locale=None):
    locale = locale or current_locale()
    meta = conf.get_supported().get(locale)
    if meta and meta.get("direction"):
        return meta["direction"] == "rtl"
    return locale.split("-")[0] in conf.get_setting("RTL_LANGUAGES", [])


def locale_direction(locale=None):
    return "rtl" if is_rtl(locale) else "ltr"


def localized_url(path, locale=None, host=None):
    """Build ``path`` for ``locale`` according to the URL locale type."""
    locale = locale or current_locale()
    url_type = conf.get_setting("URL_LOCALE_TYPE")
    if not path.startswith("/"):
        path = "/" + path

    if url_type == "path":
        hide_default = conf.get_setting("HIDE_DEFAULT_IN_URL", True)
        if hide_default and locale == conf.get_default_locale():
            return path
        return f"/{locale}{path}"

    if url_type == "subdomain" and host:
        labels = host.split(".")
        if conf.is_supported(labels[0]):
            labels = labels[1:]
        return f"//{locale}.{'.'.join(labels)}{path}"

    return path


def format_currency(amount, currency=None, locale=None):
    """Format ``amount`` with the symbol of ``currency`` (the locale's by default)."""
    locale = locale or current_locale()
    currency = currency or conf.get_supported().get(locale, {}).get("currency", "BDT")
    meta = conf.get_setting("CURRENCIES", {}).get(currency, {"symbol": currency, "decimals": 2})
    places = Decimal(1).scaleb(-meta.get("decimals", 2))
    value = Decimal(str(amount or 0)).quantize(places, rounding=ROUND_HALF_UP)
    return f"{meta['symbol']}{value:,}"


def format_date(value, fmt=None, locale=None):
    """Format a date with the locale's date format, in the locale's language."""
    if value is None:
        return ""
    locale = locale or current_locale()
    fmt = fmt or conf.get_supported().get(locale, {}).get("date_format", "M j, Y")
    if isinstance(value, datetime) and timezone.is_aware(value):
        value = timezone.localtime(value)
    elif not isinstance(value, (date, datetime)):
        return str(value)
    with translation.override(locale):
        return dateformat.format(value, fmt)


def trans(key, replace=None, locale=None, fallback=None):
    return TranslationService().get(key, locale=locale, replace=replace, fallback=fallback)


def trans_choice(key, number, replace=None, locale=None):
    return TranslationService().choice(key, number, locale=locale, replace=replace)
