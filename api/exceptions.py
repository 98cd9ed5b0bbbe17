"""Map exceptions raised while serving API requests to responses."""
from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from config.exceptions import DomainError

logger = logging.getLogger(__name__)


def exception_handler(exc, context):
    """DRF ``EXCEPTION_HANDLER``.

    - DRF exceptions keep their status and ``detail`` body
    - `DomainError` maps to its ``status_code`` with the message as detail
    - anything else is logged and answered with an empty 400
    """
    if isinstance(exc, DomainError):
        logger.warning("%s: %s", type(exc).__name__, exc.message)
        body = {"detail": exc.message}
        if exc.details:
            body["details"] = exc.details
        return Response(body, status=exc.status_code)

    response = drf_exception_handler(exc, context)
    if response is None:
        logger.error("Error during request!", exc_info=exc)
        return Response(status=status.HTTP_400_BAD_REQUEST)
    return response
