"""Base settings for Sanatoni Mart."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent
SRC_DIR = BASE_DIR / "src"

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get("SECRET_KEY")

# Debug mode - override in dev.py
DEBUG = False

ALLOWED_HOSTS = []

# Application definition
DJANGO_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
]

# Local apps
LOCAL_APPS = [
    "sanatoni.core",
    "sanatoni.localization",
    "sanatoni.catalog",
    "sanatoni.promotions",
    "sanatoni.store",
    "sanatoni.account",
    "sanatoni.content",
    "sanatoni.reviews",
    "sanatoni.newsletter",
    "sanatoni.backoffice",
]

INSTALLED_APPS = DJANGO_APPS + LOCAL_APPS

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "sanatoni.localization.middleware.LocalizationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "sanatoni.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
                "sanatoni.core.context_processors.storefront",
            ],
        },
    },
]

WSGI_APPLICATION = "sanatoni.wsgi.application"

# Database - PostgreSQL only
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ.get("POSTGRES_DB", "sanatoni"),
        "USER": os.environ.get("POSTGRES_USER", "postgres"),
        "PASSWORD": os.environ.get("POSTGRES_PASSWORD", "postgres"),
        "HOST": os.environ.get("POSTGRES_HOST", "localhost"),
        "PORT": os.environ.get("POSTGRES_PORT", "5432"),
        "OPTIONS": {
            "connect_timeout": 10,
        },
        "CONN_MAX_AGE": 60,
        "CONN_HEALTH_CHECKS": True,
    }
}

# Cache configuration
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.redis.RedisCache",
        "LOCATION": os.environ.get("REDIS_URL", "redis://localhost:6379/0"),
    }
}

# Custom user model
AUTH_USER_MODEL = "core.User"

AUTHENTICATION_BACKENDS = [
    "sanatoni.core.backends.EmailBackend",
]

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

# Login redirects
LOGIN_REDIRECT_URL = "/dashboard/"
LOGOUT_REDIRECT_URL = "/"
LOGIN_URL = "/login/"

# Internationalization
LANGUAGE_CODE = "en"
LANGUAGES = [
    ("en", "English"),
    ("bn", "Bengali"),
]
TIME_ZONE = os.environ.get("TIME_ZONE", "Asia/Dhaka")
USE_I18N = True
USE_TZ = True

# Static files
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# Media files
MEDIA_URL = "/media/"
MEDIA_ROOT = BASE_DIR / "media"

STORAGES = {
    "default": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
    },
    "staticfiles": {
        "BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage",
    },
}

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Email
EMAIL_BACKEND = "django.core.mail.backends.smtp.EmailBackend"
EMAIL_HOST = os.environ.get("EMAIL_HOST", "localhost")
EMAIL_PORT = int(os.environ.get("EMAIL_PORT", "25"))
EMAIL_HOST_USER = os.environ.get("EMAIL_HOST_USER", "")
EMAIL_HOST_PASSWORD = os.environ.get("EMAIL_HOST_PASSWORD", "")
EMAIL_USE_TLS = os.environ.get("EMAIL_USE_TLS", "false").lower() == "true"
DEFAULT_FROM_EMAIL = os.environ.get("DEFAULT_FROM_EMAIL", "Sanatoni Mart <orders@sanatonimart.com>")

# Storefront configuration
SITE_NAME = os.environ.get("SITE_NAME", "Sanatoni Mart")
SITE_URL = os.environ.get("SITE_URL", "http://localhost:8000")

STORE = {
    "SITE_NAME": SITE_NAME,
    "SUPPORT_EMAIL": os.environ.get("SUPPORT_EMAIL", "support@sanatonimart.com"),
    "SUPPORT_PHONE": os.environ.get("SUPPORT_PHONE", "+880 1700-000000"),
    "CURRENCY_SYMBOL": "৳",
    "ORDER_NUMBER_PREFIX": "ORD",
    "INVOICE_NUMBER_PREFIX": "INV",
    "DEFAULT_DELIVERY_DAYS": 7,
    "LOW_STOCK_THRESHOLD": 10,
    "PRODUCTS_PER_PAGE": 12,
}

# Locale detection and supported languages
LOCALE = {
    "DEFAULT": "en",
    "FALLBACK": "en",
    "DETECTION_ORDER": ["user", "session", "header", "url", "query"],
    "URL_LOCALE_TYPE": os.environ.get("URL_LOCALE_TYPE") or None,
}

# Media library
MEDIA_LIBRARY = {
    "MAX_FILE_SIZE": 10 * 1024 * 1024,
    "MAX_IMAGE_WIDTH": 2048,
    "MAX_IMAGE_HEIGHT": 2048,
}

# Shared props attached to every rendered page
PAGE_PROPS_PROVIDERS = [
    "sanatoni.core.props.auth_props",
    "sanatoni.core.props.flash_props",
    "sanatoni.localization.props.locale_props",
    "sanatoni.store.props.cart_props",
    "sanatoni.backoffice.navigation.navigation_props",
]

# Back office navigation, filtered per user permissions
BACKOFFICE_NAV = [
    {"label": "Dashboard", "url": "backoffice:dashboard", "section": "Main"},
    {"label": "Orders", "url": "backoffice:order-list", "section": "Sales", "permission": "view_orders"},
    {"label": "Coupons", "url": "backoffice:coupon-list", "section": "Sales", "permission": "view_promotions"},
    {"label": "Flash Sales", "url": "backoffice:flash-sale-list", "section": "Sales", "permission": "view_promotions"},
    {"label": "Products", "url": "backoffice:product-list", "section": "Catalog", "permission": "view_products"},
    {"label": "Categories", "url": "backoffice:category-list", "section": "Catalog", "permission": "view_categories"},
    {"label": "Shipping Zones", "url": "backoffice:shipping-zone-list", "section": "Catalog", "permission": "view_orders"},
    {"label": "Reviews", "url": "backoffice:review-list", "section": "Catalog", "permission": "view_products"},
    {"label": "Pages", "url": "backoffice:page-list", "section": "Content", "permission": "view_content"},
    {"label": "Blog", "url": "backoffice:post-list", "section": "Content", "permission": "view_blog"},
    {"label": "Media", "url": "backoffice:media-list", "section": "Content", "permission": "view_content"},
    {"label": "SEO", "url": "backoffice:seo-index", "section": "Content", "permission": "edit_content"},
    {"label": "Subscribers", "url": "backoffice:subscriber-list", "section": "Content", "permission": "view_newsletter"},
    {"label": "Users", "url": "backoffice:user-list", "section": "Administration", "roles": ["admin"]},
]

# Logging configuration
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {module} {message}",
            "style": "{",
        },
        "json": {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "INFO",
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": os.environ.get("DJANGO_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
        "sanatoni": {
            "handlers": ["console"],
            "level": "DEBUG",
            "propagate": False,
        },
    },
}
