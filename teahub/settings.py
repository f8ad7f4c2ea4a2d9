"""
Django settings for teahub project.

All deployment specific values are read from environment variables.
"""

import os
from pathlib import Path

from teahub.logging import build_logging_config

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: bool = False) -> bool:
    return os.environ.get(name, str(default)).strip().lower() in ("1", "true", "yes", "on")


SECRET_KEY = os.environ.get("SECRET_KEY", "django-insecure-change-me")

DEBUG = _env_bool("DEBUG")

ALLOWED_HOSTS = [host.strip() for host in os.environ.get("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if host]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "ninja",
    "teahub.apps.core",
    "teahub.apps.teams",
    "teahub.apps.tea",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "teahub.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "teahub.wsgi.application"
ASGI_APPLICATION = "teahub.asgi.application"

AUTH_USER_MODEL = "core.User"

# Store calls must not block indefinitely; a timed out statement surfaces as a 500.
TEA_STORE_TIMEOUT_SECONDS = float(os.environ.get("TEA_STORE_TIMEOUT_SECONDS", "2"))

DATABASE_ENGINE = os.environ.get("DATABASE_ENGINE", "sqlite").lower()

if DATABASE_ENGINE == "postgresql":
    _timeout_ms = int(TEA_STORE_TIMEOUT_SECONDS * 1000)
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.environ.get("DATABASE_NAME", "teahub"),
            "USER": os.environ.get("DATABASE_USER", "teahub"),
            "PASSWORD": os.environ.get("DATABASE_PASSWORD", ""),
            "HOST": os.environ.get("DATABASE_HOST", "localhost"),
            "PORT": os.environ.get("DATABASE_PORT", "5432"),
            "CONN_MAX_AGE": int(os.environ.get("DATABASE_CONN_MAX_AGE", "60")),
            "OPTIONS": {
                "connect_timeout": max(1, int(TEA_STORE_TIMEOUT_SECONDS)),
                "options": f"-c statement_timeout={_timeout_ms} -c lock_timeout={_timeout_ms}",
            },
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": os.environ.get("DATABASE_NAME", str(BASE_DIR / "db.sqlite3")),
            "OPTIONS": {
                "timeout": TEA_STORE_TIMEOUT_SECONDS,
            },
        }
    }

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# Pagination limits for the list endpoints
TEA_DEFAULT_PAGE_SIZE = int(os.environ.get("TEA_DEFAULT_PAGE_SIZE", "100"))
TEA_MAX_PAGE_SIZE = int(os.environ.get("TEA_MAX_PAGE_SIZE", "1000"))

TEAMS_SUPPORTED_ROLES = [
    ("owner", "Owner"),
    ("admin", "Admin"),
    ("guest", "Guest"),
]

LOGGING = build_logging_config(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    db_level=os.environ.get("DB_LOG_LEVEL", "WARNING").upper(),
)
