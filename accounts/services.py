"""User lookups and password checks."""
from __future__ import annotations

import logging

from django.contrib.auth.models import User
from django.db import transaction

from .models import Role, UserProfile

logger = logging.getLogger(__name__)


class UserService:
    """Thin service over Django's auth user and the role profile."""

    def add_user(self, username: str, password: str, lecturer: bool = False) -> User:
        with transaction.atomic():
            user = User.objects.create_user(username=username, password=password)
            role = Role.LECTURER if lecturer else Role.PARTICIPANT
            UserProfile.objects.update_or_create(user=user, defaults={"role": role})
        logger.info("Created user %s (lecturer=%s)", username, lecturer)
        return self.get_user(username)

    def get_user(self, username: str) -> User | None:
        return User.objects.select_related("profile").filter(username=username).first()

    def get_user_by_id(self, user_id) -> User | None:
        try:
            return User.objects.select_related("profile").filter(pk=int(user_id)).first()
        except (TypeError, ValueError):
            return None

    def get_all_users(self) -> list[User]:
        return list(User.objects.select_related("profile").order_by("username"))

    def is_password_valid(self, user_or_username: User | str, password: str) -> bool:
        if isinstance(user_or_username, str):
            user = self.get_user(user_or_username)
        else:
            user = user_or_username
        if user is None or not user.has_usable_password():
            return False
        return user.check_password(password)
