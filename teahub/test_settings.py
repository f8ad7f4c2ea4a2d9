"""Settings for the test suite: in-memory SQLite, fast hashing, quiet logs."""

import os

os.environ.setdefault("LOG_LEVEL", "WARNING")

from .settings import *  # NOQA
from .settings import TEA_STORE_TIMEOUT_SECONDS

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("TEST_DATABASE_NAME", ":memory:"),
        "OPTIONS": {"timeout": TEA_STORE_TIMEOUT_SECONDS},
    }
}

SECRET_KEY = "django-insecure-test-key-do-not-use-in-production"  # nosec B105

ALLOWED_HOSTS = ["*"]

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

CACHES = {"default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"}}

TESTING = True
