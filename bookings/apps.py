from django.apps import AppConfig


class BookingsConfig(AppConfig):
    """App configuration for spot bookings on course dates."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "bookings"
