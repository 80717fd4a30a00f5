"""
KVL Logistics — DEVELOPMENT settings.
SQLite, DEBUG=True, emails printed to the console, Celery runs eagerly.
DO NOT use in production.
"""

from pathlib import Path
from datetime import timedelta

BASE_DIR = Path(__file__).resolve().parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = "dev-insecure-key-change-in-production-do-not-use"

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = True

ALLOWED_HOSTS = ["*"]

DJANGO_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
]

THIRD_PARTY_APPS = [
    "rest_framework",
    "rest_framework_simplejwt",
    "drf_spectacular",
    "django_filters",
    "corsheaders",
]

LOCAL_APPS = [
    "apps.authentication",
    "apps.numbering",
    "apps.customers",
    "apps.fleet",
    "apps.consignments",
    "apps.billing",
    "apps.chalans",
    "apps.notifications",
    "apps.documents",
    "apps.ops",
]

INSTALLED_APPS = DJANGO_APPS + THIRD_PARTY_APPS + LOCAL_APPS

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "kvl.urls"
WSGI_APPLICATION = "kvl.wsgi.application"

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
            ],
        },
    },
]

# ── Database: SQLite for dev ──────────────────────────────────────────────────
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

# ── Cache: in-memory for dev ──────────────────────────────────────────────────
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

# No broker in dev: tasks execute inline
CELERY_TASK_ALWAYS_EAGER = True

AUTH_USER_MODEL = "authentication.Operator"

SIMPLE_JWT = {
    "ACCESS_TOKEN_LIFETIME":  timedelta(hours=24),  # longer in dev for convenience
    "REFRESH_TOKEN_LIFETIME": timedelta(days=30),
    "ALGORITHM": "HS256",
    "AUTH_HEADER_TYPES": ("Bearer",),
}

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework_simplejwt.authentication.JWTAuthentication",
        "rest_framework.authentication.SessionAuthentication",  # useful in dev/browsable API
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "DEFAULT_FILTER_BACKENDS": [
        "django_filters.rest_framework.DjangoFilterBackend",
        "rest_framework.filters.SearchFilter",
        "rest_framework.filters.OrderingFilter",
    ],
    "DEFAULT_PAGINATION_CLASS": "rest_framework.pagination.PageNumberPagination",
    "PAGE_SIZE": 20,
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "EXCEPTION_HANDLER": "apps.common.exceptions.api_exception_handler",
    # No throttling in dev
}

SPECTACULAR_SETTINGS = {
    "TITLE": "KVL Logistics API (Dev)",
    "DESCRIPTION": "Development build — KVL Logistics back-office",
    "VERSION": "dev",
}

LANGUAGE_CODE = "en-in"
TIME_ZONE     = "Asia/Kolkata"
USE_I18N      = True
USE_TZ        = True

STATIC_URL  = "/static/"
MEDIA_URL   = "/media/"
MEDIA_ROOT  = BASE_DIR / "media"

# Dev: relaxed CORS
CORS_ALLOW_ALL_ORIGINS = True

KVL_COMPANY_NAME           = "KVL Logistics"
KVL_NUMBER_PREFIX          = "KVL"
KVL_ESTIMATED_TRANSIT_DAYS = 2
KVL_SMS_ENABLED            = False
KVL_COMPANY_PAN            = "AAAAA0000A"
KVL_COMPANY_GSTIN          = ""
KVL_BANK_NAME              = "DEMO BANK"
KVL_BANK_ACCOUNT           = "000000000000"
KVL_BANK_IFSC              = "DEMO0000001"

SMS_GATEWAY_URL     = "http://localhost:8003/send"
SMS_API_KEY         = "dev-key"   # any non-empty value passes docker/mocks/sms_server.py
NOTIFICATIONS_ASYNC = False

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Dev-only: print emails to console instead of sending
EMAIL_BACKEND      = "django.core.mail.backends.console.EmailBackend"
DEFAULT_FROM_EMAIL = "KVL Logistics <dev@localhost>"

# Dev logging: verbose, human-readable (not JSON)
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        }
    },
    "formatters": {
        "verbose": {
            "format": "[{levelname}] {name}: {message}",
            "style": "{",
        }
    },
    "root": {"handlers": ["console"], "level": "DEBUG"},
}
