"""
Base Django settings for ActivationServer.

These settings are shared across all environments.
Environment-specific overrides are in dev.py, test.py, and prod.py
"""
import os
from pathlib import Path

from .logging import get_logging_config

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "DJANGO_SECRET_KEY",
    "django-insecure-activation-server-development-only-key",
)

# Application definition
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Third party
    "rest_framework",
    "drf_spectacular",
    # Local apps
    "ActivationServer.apps.ActivationServerConfig",
    "core",
    "audit",
    "products",
    "licenses",
    "versions",
    "devices",
    "api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # Custom middleware
    "core.middleware.actor.ActorMiddleware",
    "core.middleware.observability.ObservabilityMiddleware",
    "core.middleware.metrics.MetricsMiddleware",
]

ROOT_URLCONF = "ActivationServer.urls"

TEMPLATES = [
    {
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
    },
]

WSGI_APPLICATION = "ActivationServer.wsgi.application"
ASGI_APPLICATION = "ActivationServer.asgi.application"

# Database
# https://docs.djangoproject.com/en/4.2/ref/settings/#databases
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ.get("DB_NAME", "activation_server"),
        "USER": os.environ.get("DB_USER", "postgres"),
        "PASSWORD": os.environ.get("DB_PASSWORD", "postgres"),
        "HOST": os.environ.get("DB_HOST", "localhost"),
        "PORT": os.environ.get("DB_PORT", "5432"),
        "OPTIONS": {
            "connect_timeout": 10,
        },
    }
}

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {
        "NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.MinimumLengthValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.CommonPasswordValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.NumericPasswordValidator",
    },
]

# Internationalization
LANGUAGE_CODE = "en-us"
LANGUAGES = [
    ("en", "English"),
    ("zh-hans", "Simplified Chinese"),
]
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

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
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.SessionAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [],
    "EXCEPTION_HANDLER": "api.exceptions.custom_exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

# drf-spectacular settings
SPECTACULAR_SETTINGS = {
    "TITLE": "Activation Server API",
    "DESCRIPTION": (
        "Product, license type, feature and device management with an "
        "append-only audit ledger. Issues signed and encrypted activation "
        "files that let devices prove their entitlements offline."
    ),
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": "/api/v1",
    "TAGS": [
        {"name": "Products", "description": "Products and their managers"},
        {"name": "License Types", "description": "License tiers and their features"},
        {"name": "Features", "description": "Product feature catalogue"},
        {"name": "Versions", "description": "Firmware and software releases"},
        {"name": "Devices", "description": "Devices and activation files"},
        {"name": "Audit", "description": "Audit ledger queries"},
        {"name": "Health", "description": "Health check endpoints"},
    ],
}

# Identity
# Reserved user ids: the super-admin bypasses product manager records,
# the anonymous actor signs audit entries written before authentication.
SUPER_ADMIN_ID = int(os.environ.get("SUPER_ADMIN_ID", "1"))
ANONYMOUS_ACTOR_ID = 100000000
ACTOR_HEADER = "X-Actor-ID"

# Pagination
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# Activation file key material
# ACTIVATION_SYMMETRIC_KEYS is a key ring: "id:base64key,id:base64key".
# Rotate by adding a key and pointing ACTIVATION_SYMMETRIC_KEY_ID at it.
ACTIVATION_PRIVATE_KEY_PATH = os.environ.get(
    "ACTIVATION_PRIVATE_KEY_PATH", str(BASE_DIR / "keys" / "private.pem")
)
ACTIVATION_SYMMETRIC_KEYS = os.environ.get("ACTIVATION_SYMMETRIC_KEYS", "")
ACTIVATION_SYMMETRIC_KEY_ID = os.environ.get("ACTIVATION_SYMMETRIC_KEY_ID", "")
ACTIVATION_LOAD_KEYS_ON_STARTUP = True

# Observability
LOGGING = get_logging_config(os.environ.get("ENVIRONMENT", "development"))
