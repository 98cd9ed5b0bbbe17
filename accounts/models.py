"""Accounts models: user profile and roles.

Defines a `UserProfile` associated one-to-one with Django's `User`,
capturing whether the user is a lecturer. The Django username is the
user's public name. The profile is created automatically on user creation.
"""
from __future__ import annotations

from django.conf import settings
from django.db import models


class Role(models.TextChoices):
    """Platform roles used for role-based guards."""

    PARTICIPANT = "participant", "Participant"
    LECTURER = "lecturer", "Lecturer"


class UserProfile(models.Model):
    """Profile linked to a Django auth user.

    - `role`: lecturers may create and manage courses; participants book
    """

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile")
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.PARTICIPANT)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:  # pragma: no cover (string repr convenience)
        return f"Profile<{self.user.username}:{self.role}>"

    @property
    def is_lecturer(self) -> bool:
        return self.role == Role.LECTURER


def is_lecturer(user) -> bool:
    """True when ``user`` is authenticated and holds the lecturer role."""
    if not getattr(user, "is_authenticated", False):
        return False
    profile = getattr(user, "profile", None)
    return bool(profile and profile.is_lecturer)
