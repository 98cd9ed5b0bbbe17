"""Signed session tokens (JWT).

A token carries the user id as subject, the user name and the lecturer
flag. Tokens are signed with the configured secret (HS256), carry a fixed
issuer and expire after ``TOKEN_LIFETIME``.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import logging
from typing import Any, Optional

from django.conf import settings
from django.contrib.auth.models import User
import jwt
from jwt import PyJWTError
from rest_framework import status
from rest_framework.exceptions import APIException

from .models import is_lecturer
from .services import UserService

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class InvalidToken(APIException):
    """Token is malformed, expired, badly signed or misses a constraint."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Token does not match required parameters!"
    default_code = "invalid_token"


@dataclass(frozen=True)
class TokenUser:
    id: str
    name: str
    is_lecturer: bool


class AuthService:
    def __init__(self, user_service: Optional[UserService] = None):
        self.user_service = user_service or UserService()

    @property
    def secret(self) -> str:
        return settings.JWT_SECRET

    def generate_token(self, user: User) -> str:
        """Issue a token embedding the user's name and lecturer flag."""
        now = datetime.now(timezone.utc)
        payload: dict[str, Any] = {
            "sub": str(user.pk),
            "name": user.username,
            "lecturer": is_lecturer(user),
            "iss": settings.TOKEN_ISSUER,
            "iat": now,
            "exp": now + settings.TOKEN_LIFETIME,
        }
        return jwt.encode(payload, self.secret, algorithm=ALGORITHM)

    def verify_token(self, token: str, lecturer_required: bool = False, name: Optional[str] = None) -> TokenUser:
        """Decode ``token`` and check the optional constraints.

        Raises:
            InvalidToken: on any decoding failure or unmet constraint.
        """
        try:
            decoded = jwt.decode(
                token,
                self.secret,
                algorithms=[ALGORITHM],
                issuer=settings.TOKEN_ISSUER,
                options={"require": ["exp", "iss", "sub"]},
            )
        except PyJWTError as exc:
            logger.error("Error decoding JWT token! (%s)", exc)
            raise InvalidToken() from exc

        if lecturer_required and not decoded.get("lecturer"):
            raise InvalidToken()
        if name is not None and name != decoded.get("name"):
            raise InvalidToken()
        return TokenUser(
            id=str(decoded["sub"]),
            name=str(decoded.get("name", "")),
            is_lecturer=bool(decoded.get("lecturer")),
        )

    def log_in(self, username: str, password: str) -> Optional[tuple[User, str]]:
        """Check credentials; return the user and a fresh token, or None."""
        if not self.user_service.is_password_valid(username, password):
            logger.info("Failed login for %s", username)
            return None
        user = self.user_service.get_user(username)
        return user, self.generate_token(user)
