"""Request body validation against the JSON schemas in ``SCHEMA_DIR``."""
from __future__ import annotations

from functools import lru_cache, wraps
from typing import Iterable

from django.conf import settings
from rest_framework.exceptions import ValidationError

from config.schemas import SchemaService


@lru_cache(maxsize=None)
def get_schema_service() -> SchemaService:
    return SchemaService(settings.SCHEMA_DIR)


def validate_request(schema_name: str, additional_schemas: Iterable[str] = ()):
    """Validate ``request.data`` before the decorated view handler runs.

    Invalid bodies are answered with 400 and the list of schema errors.
    """
    additional = tuple(additional_schemas)

    def decorator(handler):
        @wraps(handler)
        def _wrapped(view, request, *args, **kwargs):
            errors = get_schema_service().validate(request.data, schema_name, additional)
            if errors:
                raise ValidationError({"detail": "Request body does not match the schema.", "errors": errors})
            return handler(view, request, *args, **kwargs)

        return _wrapped

    return decorator
