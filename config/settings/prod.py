"""Production settings for the course booking API.

Security-focused configuration. Expected to run behind a proxy with an
ASGI server (Daphne). The token secret must come from the configuration
file or the environment.
"""
from .base import *  # noqa
import os


DEBUG = False

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY")
if not SECRET_KEY:
    raise RuntimeError("DJANGO_SECRET_KEY must be set in production.")

JWT_SECRET = APP_CONFIG.get("jwt")  # noqa: F405
if not JWT_SECRET:
    raise RuntimeError("A 'jwt' signing secret must be set in the configuration file.")

_hosts = os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1")
ALLOWED_HOSTS = [h.strip() for h in _hosts.split(",") if h.strip()]

# Static files via WhiteNoise in production
MIDDLEWARE.insert(1, "whitenoise.middleware.WhiteNoiseMiddleware")  # noqa: F405
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}

# Secure cookies and HSTS (tune for hosting environment)
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
TOKEN_COOKIE_SECURE = True
SECURE_HSTS_SECONDS = 60 * 60 * 24 * 30  # 30 days starter
SECURE_HSTS_INCLUDE_SUBDOMAINS = False
SECURE_HSTS_PRELOAD = False
SECURE_SSL_REDIRECT = os.environ.get("SECURE_SSL_REDIRECT", "1").lower() in ("1", "true")
SECURE_REFERRER_POLICY = "same-origin"
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")

# Single-line JSON records for log shipping
LOGGING["handlers"]["console"]["formatter"] = "json"  # noqa: F405
