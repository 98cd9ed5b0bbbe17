"""DRF authentication from the ``jsession`` cookie or a bearer header."""
from __future__ import annotations

import re
from typing import Optional

from django.conf import settings
from rest_framework.authentication import BaseAuthentication

from .tokens import AuthService, InvalidToken

_BEARER = re.compile(r"^bearer(\s+|$)", re.IGNORECASE)


def token_from_request(request) -> Optional[str]:
    """Return the raw token from the cookie, else the Authorization header.

    A bearer header without a token yields an empty string, which then
    fails verification like any other bad token.
    """
    cookie = request.COOKIES.get(settings.TOKEN_COOKIE_NAME)
    if cookie:
        return cookie
    header = request.META.get("HTTP_AUTHORIZATION", "")
    if _BEARER.match(header):
        return _BEARER.sub("", header, count=1).strip()
    return None


class JSessionAuthentication(BaseAuthentication):
    """Resolve the request user from a signed session token.

    No token means anonymous; protected views then answer 403. A token that
    does not verify, or names a user that no longer exists, raises
    `InvalidToken` (400). Without an ``authenticate_header`` DRF answers
    missing credentials with 403 rather than a 401 challenge.
    """

    auth_service_class = AuthService

    def authenticate(self, request):
        raw = token_from_request(request)
        if raw is None:
            return None
        auth_service = self.auth_service_class()
        claims = auth_service.verify_token(raw)
        user = auth_service.user_service.get_user_by_id(claims.id)
        if user is None or not user.is_active:
            raise InvalidToken()
        return user, claims
