"""Base Django settings for the course booking API.

This base layer is environment-agnostic. Development/production/test
settings extend from this module in `dev.py`, `prod.py` and `test.py`.

Deployment values (port, database, token secret) come from the JSON
configuration file, read once per process via `ConfigurationService`.
"""
from datetime import timedelta
from pathlib import Path
import os

from config.configuration import ConfigurationService, database_settings
from config.schemas import SchemaService


# Base directory of the project (repository root)
BASE_DIR = Path(__file__).resolve().parent.parent.parent


# Request/config schemas and the configuration file
SCHEMA_DIR = Path(os.environ.get("COURSEBOOKING_SCHEMA_DIR", BASE_DIR / "schemas"))
CONFIG_FILE = Path(os.environ.get("COURSEBOOKING_CONFIG", BASE_DIR / "conf" / "config.json"))

APP_CONFIG = ConfigurationService(CONFIG_FILE, SchemaService(SCHEMA_DIR)).get_configuration()
PORT = APP_CONFIG["port"]


# Security (overridden in dev/prod)
SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-insecure-key-change-me-0123456789abcdef")
DEBUG = False
ALLOWED_HOSTS: list[str] = []


# Applications
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "daphne",
    "django.contrib.staticfiles",
    # Third-party apps (API, filters and docs)
    "rest_framework",
    "django_filters",
    "drf_spectacular",
    # Local apps
    "accounts",
    "courses",
    "bookings",
    "api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "config.middleware.RequestLogMiddleware",
    "config.middleware.ContentSecurityPolicyMiddleware",
    # "whitenoise.middleware.WhiteNoiseMiddleware",  # enabled in prod.py
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

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
    }
]

ASGI_APPLICATION = "config.asgi.application"


# Database: SQLite unless the configuration file names another engine
DATABASES = {"default": database_settings(APP_CONFIG, BASE_DIR)}


LANGUAGE_CODE = "en-us"
TIME_ZONE = "Europe/Berlin"
USE_I18N = True
USE_TZ = True


# Static files
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"
_static_dir = BASE_DIR / "static"
STATICFILES_DIRS = [_static_dir] if _static_dir.exists() else []


DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# Django REST Framework
REST_FRAMEWORK = {
    # JSON only; an HTML renderer would authenticate eagerly
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "accounts.authentication.JSessionAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "DEFAULT_FILTER_BACKENDS": [
        "django_filters.rest_framework.DjangoFilterBackend",
        "rest_framework.filters.SearchFilter",
        "rest_framework.filters.OrderingFilter",
    ],
    # Login attempts only; see api.throttling
    "DEFAULT_THROTTLE_RATES": {
        "login": "10/min",
    },
    "EXCEPTION_HANDLER": "api.exceptions.exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "DATETIME_FORMAT": "iso-8601",
    "UNAUTHENTICATED_USER": "django.contrib.auth.models.AnonymousUser",
}

SPECTACULAR_SETTINGS = {
    "TITLE": "Course Booking API",
    "DESCRIPTION": "Courses, course dates and spot bookings.",
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "DISABLE_ERRORS_AND_WARNINGS": True,
    "COMPONENT_SPLIT_REQUEST": True,
    "APPEND_COMPONENTS": {
        "securitySchemes": {
            "cookieAuth": {"type": "apiKey", "in": "cookie", "name": "jsession"},
            "bearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"},
        }
    },
}


# Session tokens (JWT)
JWT_SECRET = APP_CONFIG.get("jwt") or SECRET_KEY
TOKEN_ISSUER = "CourseBookingApp"
TOKEN_LIFETIME = timedelta(hours=1)
TOKEN_COOKIE_NAME = "jsession"
TOKEN_COOKIE_SECURE = False


# Password policy
AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator", "OPTIONS": {"min_length": 8}},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
]
# Prefer Argon2 for password hashing when available.
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.Argon2PasswordHasher",
    "django.contrib.auth.hashers.PBKDF2PasswordHasher",
    "django.contrib.auth.hashers.PBKDF2SHA1PasswordHasher",
    "django.contrib.auth.hashers.BCryptSHA256PasswordHasher",
    "django.contrib.auth.hashers.ScryptPasswordHasher",
]


# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "console": {
            "format": "[{asctime} - {name} - {levelname}] {message}",
            "datefmt": "%Y-%m-%d %H:%M:%S",
            "style": "{",
        },
        "json": {
            "format": '{{"time": "{asctime}", "logger": "{name}", "level": "{levelname}", "message": "{message}"}}',
            "datefmt": "%Y-%m-%dT%H:%M:%S%z",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "console",
        },
    },
    "root": {"handlers": ["console"], "level": LOG_LEVEL},
    "loggers": {
        "django.db.backends": {"level": "WARNING"},
    },
}
