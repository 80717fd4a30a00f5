"""
pytest configuration for KVL Logistics.
Configures Django settings before collection; shared fixtures live in tests/conftest.py.
"""

from datetime import timedelta

from django.conf import settings


def pytest_configure(config):
    """Configure Django settings before tests run."""
    if not settings.configured:
        settings.configure(
            DATABASES={
                "default": {
                    "ENGINE": "django.db.backends.sqlite3",
                    "NAME":   ":memory:",
                }
            },
            INSTALLED_APPS=[
                "django.contrib.admin",
                "django.contrib.contenttypes",
                "django.contrib.auth",
                "django.contrib.sessions",
                "django.contrib.messages",
                "django.contrib.staticfiles",
                "rest_framework",
                "rest_framework_simplejwt",
                "drf_spectacular",
                "django_filters",
                "corsheaders",
                "django_prometheus",
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
            ],
            AUTH_USER_MODEL="authentication.Operator",
            REST_FRAMEWORK={
                "DEFAULT_AUTHENTICATION_CLASSES": [
                    "rest_framework_simplejwt.authentication.JWTAuthentication",
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
                "PAGE_SIZE": 50,
                "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
                "EXCEPTION_HANDLER": "apps.common.exceptions.api_exception_handler",
            },
            SPECTACULAR_SETTINGS={
                "TITLE": "KVL Logistics API",
                "DESCRIPTION": "Consignment booking, fleet assignment, freight billing and load chalans",
                "VERSION": "1.0.0",
                "SERVE_INCLUDE_SCHEMA": False,
            },
            SECRET_KEY="test-secret-key-not-for-production",
            DEBUG=True,
            USE_TZ=True,
            TIME_ZONE="Asia/Kolkata",
            ROOT_URLCONF="kvl.urls",
            DEFAULT_AUTO_FIELD="django.db.models.BigAutoField",
            TEMPLATES=[{
                "BACKEND": "django.template.backends.django.DjangoTemplates",
                "DIRS": [],
                "APP_DIRS": True,
                "OPTIONS": {
                    "context_processors": [
                        "django.template.context_processors.debug",
                        "django.template.context_processors.request",
                        "django.contrib.auth.context_processors.auth",
                        "django.contrib.messages.context_processors.messages",
                    ],
                },
            }],
            MIDDLEWARE=[
                "django.middleware.security.SecurityMiddleware",
                "corsheaders.middleware.CorsMiddleware",
                "django.contrib.sessions.middleware.SessionMiddleware",
                "django.middleware.common.CommonMiddleware",
                "django.middleware.csrf.CsrfViewMiddleware",
                "django.contrib.auth.middleware.AuthenticationMiddleware",
                "django.contrib.messages.middleware.MessageMiddleware",
            ],
            STATIC_URL="/static/",
            STATIC_ROOT="/tmp/staticfiles_test",
            CACHES={
                "default": {
                    "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
                }
            },
            CELERY_TASK_ALWAYS_EAGER=True,   # Execute tasks synchronously in tests
            CELERY_TASK_EAGER_PROPAGATES=True,
            CORS_ALLOW_ALL_ORIGINS=True,
            EMAIL_BACKEND="django.core.mail.backends.locmem.EmailBackend",
            DEFAULT_FROM_EMAIL="KVL Logistics <test@localhost>",
            SIMPLE_JWT={
                "ACCESS_TOKEN_LIFETIME":  timedelta(hours=8),
                "REFRESH_TOKEN_LIFETIME": timedelta(days=7),
                "ALGORITHM": "HS256",
                "AUTH_HEADER_TYPES": ("Bearer",),
            },
            # Business settings
            KVL_COMPANY_NAME="KVL Logistics",
            KVL_NUMBER_PREFIX="KVL",
            KVL_ESTIMATED_TRANSIT_DAYS=2,
            KVL_SMS_ENABLED=False,
            KVL_COMPANY_PAN="AAAAA0000A",
            KVL_COMPANY_GSTIN="",
            KVL_BANK_NAME="TEST BANK",
            KVL_BANK_ACCOUNT="000000000000",
            KVL_BANK_IFSC="TEST0000001",
            # Dummy external service URLs (mocked in tests)
            SMS_GATEWAY_URL="http://sms-mock:8003/send",
            SMS_API_KEY="test-key",
            NOTIFICATIONS_ASYNC=False,
        )
