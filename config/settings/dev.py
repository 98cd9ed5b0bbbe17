"""Development settings for the course booking API.

Extends base settings with developer-friendly defaults.
"""
from .base import *  # noqa
import os


DEBUG = True
ALLOWED_HOSTS = ["127.0.0.1", "localhost"]

# Development secret key fallback (safe only for local use)
SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-insecure-key-change-me-0123456789abcdef")
JWT_SECRET = APP_CONFIG.get("jwt") or SECRET_KEY  # noqa: F405

LOGGING["root"]["level"] = os.environ.get("LOG_LEVEL", "DEBUG").upper()  # noqa: F405
