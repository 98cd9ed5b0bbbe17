"""Custom permissions for REST API v1.

Touching ``request.user`` runs token authentication, so checks that can
be decided from the method alone do that first. Public reads then never
fail on a stale cookie.
"""
from __future__ import annotations

from rest_framework.permissions import BasePermission, SAFE_METHODS

from accounts.models import is_lecturer


class IsAuthenticatedUser(BasePermission):
    def has_permission(self, request, view):  # noqa: D401
        return bool(request.user and request.user.is_authenticated)


class IsLecturerOrReadOnly(BasePermission):
    message = "Only lecturers can manage courses."

    def has_permission(self, request, view):
        return request.method in SAFE_METHODS or is_lecturer(request.user)


class IsCourseOwnerOrReadOnly(BasePermission):
    """Object check against a `Course`: writes need its lecturer."""

    message = "Only the course's lecturer can change it."

    def has_object_permission(self, request, view, obj):
        return request.method in SAFE_METHODS or obj.is_owner(request.user)


class IsBookingOwnerOrCourseLecturer(BasePermission):
    """Object check against a booking: its user or the course's lecturer."""

    message = "Not permitted."

    def has_object_permission(self, request, view, obj):
        user = request.user
        if obj.user_id == user.id:
            return True
        return is_lecturer(user) and obj.course.is_owner(user)
