from django.apps import AppConfig


class CoursesConfig(AppConfig):
    """App configuration for courses and course dates."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "courses"
