"""
Development settings for ActivationServer.
"""
import os

from .base import *  # noqa: F403, F401

DEBUG = True

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "0.0.0.0"]

# Database - Use PostgreSQL in Docker, SQLite for local development
# Override with environment variable DB_ENGINE=sqlite for SQLite
if os.environ.get("DB_ENGINE") == "sqlite":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",  # noqa: F405
        }
    }

# Key material is optional until the first activation file is requested
ACTIVATION_LOAD_KEYS_ON_STARTUP = os.environ.get("ACTIVATION_LOAD_KEYS_ON_STARTUP") == "1"

# Email backend for development
EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"
