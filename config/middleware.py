from __future__ import annotations

import logging
import time

from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger("coursebooking.access")


class RequestLogMiddleware(MiddlewareMixin):
    """Write one access line per request.

    Requests that match no route are additionally logged as errors so
    typos in client URLs show up next to the access line.
    """

    def process_request(self, request):
        request._started_at = time.monotonic()

    def process_response(self, request, response):
        started = getattr(request, "_started_at", None)
        elapsed_ms = (time.monotonic() - started) * 1000 if started is not None else 0.0
        if response.status_code == 404 and getattr(request, "resolver_match", None) is None:
            logger.error("Path %s not found.", request.path)
        logger.info("%s %s %s %.1fms", request.method, request.get_full_path(), response.status_code, elapsed_ms)
        return response


class ContentSecurityPolicyMiddleware(MiddlewareMixin):
    """Add a basic Content-Security-Policy header.

    The API serves JSON only, except for the Swagger UI page which loads
    its assets from a CDN and needs an inline bootstrap script.
    """

    docs_path = "/api-docs/"

    def process_response(self, request, response):  # noqa: D401
        script_src = "'self'"
        style_src = "'self'"
        img_src = "'self' data:"

        if request.path == self.docs_path:
            script_src = "'self' 'unsafe-inline' https://cdn.jsdelivr.net"
            style_src = "'self' 'unsafe-inline' https://cdn.jsdelivr.net"
            img_src = "'self' data: https://cdn.jsdelivr.net"

        csp = (
            "default-src 'self'; "
            f"img-src {img_src}; "
            f"script-src {script_src}; "
            f"style-src {style_src}; "
            "frame-ancestors 'none'"
        )
        response["Content-Security-Policy"] = csp
        return response
