"""Localization configuration."""

from django.conf import settings


def get_config():
    """Get locale configuration from settings."""
    defaults = {
        'DEFAULT': 'en',
        'FALLBACK': 'en',

        # Locale code -> display metadata
        'SUPPORTED': {
            'en': {
                'name': 'English',
                'native_name': 'English',
                'flag': '🇺🇸',
                'direction': 'ltr',
                'date_format': 'M j, Y',
                'currency': 'USD',
            },
            'bn': {
                'name': 'Bengali',
                'native_name': 'বাংলা',
                'flag': '🇧🇩',
                'direction': 'ltr',
                'date_format': 'j F, Y',
                'currency': 'BDT',
            },
        },

        # Strategies tried in order; first supported locale wins
        'DETECTION_ORDER': ['user', 'session', 'header', 'url', 'query'],

        # 'path' (/bn/products/), 'subdomain' (bn.example.com) or None
        'URL_LOCALE_TYPE': None,
        'HIDE_DEFAULT_IN_URL': True,

        'SESSION_KEY': 'locale',
        'QUERY_PARAM': 'locale',
        'COOKIE_NAME': 'locale',
        'COOKIE_AGE': 60 * 60 * 24 * 365,

        'RTL_LANGUAGES': ['ar', 'he', 'fa', 'ur'],

        'CURRENCIES': {
            'BDT': {'symbol': '৳', 'decimals': 2},
            'USD': {'symbol': '$', 'decimals': 2},
        },

        'LANG_DIR': None,
        'TRANSLATION_CACHE_TIMEOUT': 60 * 60 * 24,
    }

    user_config = getattr(settings, 'LOCALE', {})
    return {**defaults, **user_config}


def get_setting(name, default=None):
    """Get a specific locale setting."""
    config = get_config()
    return config.get(name, default)


def get_default_locale():
    return get_setting('DEFAULT', 'en')


def get_fallback_locale():
    return get_setting('FALLBACK', get_default_locale())


def get_supported():
    """Supported locales with their metadata."""
    return get_setting('SUPPORTED', {})


def get_supported_locales():
    return list(get_supported().keys())


def is_supported(locale):
    return bool(locale) and locale in get_supported()
