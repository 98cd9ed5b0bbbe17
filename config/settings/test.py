"""Test settings: in-memory SQLite, fast hashing, fixed token secret."""
from .base import *  # noqa


DEBUG = False
ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

JWT_SECRET = "test-signing-secret-0123456789abcdef"

LOGGING["root"]["level"] = "WARNING"  # noqa: F405

REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"]["login"] = "1000/min"  # noqa: F405
