from django.apps import AppConfig


class ApiConfig(AppConfig):
    """App configuration for the REST API layer (v1 routes, schema docs)."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "api"
