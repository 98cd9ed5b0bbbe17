"""Domain-specific exceptions shared by the service layer.

Services raise these; `api.exceptions.exception_handler` turns them into
HTTP responses using ``status_code``.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base exception for all domain-specific errors."""

    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class CourseError(DomainError):
    """A course or course date change breaks a business rule."""


class InsufficientSpots(DomainError):
    """A booking asks for more spots than the date has left."""
