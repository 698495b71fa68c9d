from django import template

from ..utils import format_currency, format_date, trans

register = template.Library()


@register.simple_tag
def t(key, fallback=None, **replace):
    """Translate a dotted key: ``{% t "store.order_total" amount=total %}``."""
    return trans(key, replace=replace or None, fallback=fallback)


@register.filter
def currency(amount, code=None):
    return format_currency(amount, currency=code)


@register.filter
def localized_date(value, fmt=None):
    return format_date(value, fmt=fmt)
