"""
Base Django settings for LicensingService.

These settings are shared across all environments.
Environment-specific overrides are in dev.py, test.py, and prod.py
"""
import os
from datetime import timedelta
from pathlib import Path

from .logging import get_logging_config

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "SECRET_KEY", "django-insecure-q4@n7s!c0m1f$x8k2e^v9r(l)t3u5w&y6z-b=hj#d_p+g0a%i"
)

DEBUG = False

ALLOWED_HOSTS = []

# Application definition
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    # Third party
    "rest_framework",
    "drf_spectacular",
    # Local apps
    "core.apps.CoreConfig",
    "licenses",
    "accounts",
    "api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    # Custom middleware
    "core.middleware.observability.ObservabilityMiddleware",
    "core.middleware.metrics.MetricsMiddleware",
    "core.middleware.auth.JWTAuthenticationMiddleware",
]

ROOT_URLCONF = "LicensingService.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
            ],
        },
    },
]

WSGI_APPLICATION = "LicensingService.wsgi.application"
ASGI_APPLICATION = "LicensingService.asgi.application"

# Database
# https://docs.djangoproject.com/en/4.2/ref/settings/#databases
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ.get("DB_NAME", "licensing_service"),
        "USER": os.environ.get("DB_USER", "postgres"),
        "PASSWORD": os.environ.get("DB_PASSWORD", "postgres"),
        "HOST": os.environ.get("DB_HOST", "localhost"),
        "PORT": os.environ.get("DB_PORT", "5432"),
        "OPTIONS": {
            "connect_timeout": 10,
        },
    }
}

# Operator passwords are hashed with Django's hashers
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.PBKDF2PasswordHasher",
]

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# REST Framework
REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "api.exceptions.custom_exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

# drf-spectacular settings
SPECTACULAR_SETTINGS = {
    "TITLE": "Licensing Service API",
    "DESCRIPTION": (
        "License issuance service API. Provides endpoints for operator "
        "sign-in, license management and license activation."
    ),
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": "/api",
    "TAGS": [
        {"name": "Auth", "description": "Operator sessions"},
        {"name": "Licences", "description": "License management and activation"},
    ],
}

# Redis Cache
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.redis.RedisCache",
        "LOCATION": os.environ.get("REDIS_URL", "redis://127.0.0.1:6379/1"),
        "OPTIONS": {
            "socket_connect_timeout": 5,
            "socket_timeout": 5,
        },
    }
}

# Celery
CELERY_BROKER_URL = os.environ.get("CELERY_BROKER_URL", "redis://127.0.0.1:6379/0")
CELERY_TASK_SERIALIZER = "json"
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TASK_ACKS_LATE = True

# Email
EMAIL_BACKEND = "django.core.mail.backends.smtp.EmailBackend"
EMAIL_HOST = os.environ.get("EMAIL_HOST", "localhost")
EMAIL_PORT = int(os.environ.get("EMAIL_PORT", "25"))
EMAIL_HOST_USER = os.environ.get("EMAIL_HOST_USER", "")
EMAIL_HOST_PASSWORD = os.environ.get("EMAIL_HOST_PASSWORD", "")
EMAIL_USE_TLS = os.environ.get("EMAIL_USE_TLS", "false").lower() == "true"
DEFAULT_FROM_EMAIL = os.environ.get("DEFAULT_FROM_EMAIL", "no-reply@localhost")

# Licensing
LICENSING = {
    "SYSTEM_ID_PREFIX": "CFS30",
    "DUPLICATE_WINDOW_SECONDS": 10,
    "PASSWORD_LENGTH": 12,
    "SEAL_ITERATIONS": 150000,
    "PRODUCT_NAME": os.environ.get("LICENSE_PRODUCT_NAME", "CFS"),
    "SUPPORT_TEAM": os.environ.get("LICENSE_SUPPORT_TEAM", "Support Team"),
    "NOTIFICATION_FROM_EMAIL": os.environ.get("LICENSE_NOTIFICATION_FROM_EMAIL"),
}

# Operator authentication
AUTH_TOKENS = {
    "SIGNING_KEY": os.environ.get("JWT_SECRET"),
    "ALGORITHM": "HS256",
    "ACCESS_TOKEN_LIFETIME": timedelta(hours=24),
    "REFRESH_TOKEN_LIFETIME": timedelta(days=7),
}
AUTH_PROTECTED_PATHS = ("/api/logout", "/api/changePassword")

CREDENTIALS_SECRET_NAME = os.environ.get("CREDENTIALS_SECRET_NAME", "licensing-user-credentials")
CREDENTIALS_CACHE_TTL = 60

DEFAULT_ADMIN = {
    "USERNAME": "admin",
    "PASSWORD": os.environ.get("DEFAULT_ADMIN_PASSWORD", "admin123"),
    "EMAIL": os.environ.get("DEFAULT_ADMIN_EMAIL", ""),
    "PHONE": os.environ.get("DEFAULT_ADMIN_PHONE", ""),
}

# Observability
OTEL_ENABLED = os.environ.get("OTEL_SDK_DISABLED", "false").lower() != "true"
LOGGING = get_logging_config(os.environ.get("ENVIRONMENT", "development"))
