"""
Core middleware for request correlation and request-scoped identity.

`RequestIDLogMiddleware`
------------------------
- Reads `X-Request-ID` (or generates one) and reflects it in the response.
- Stores the id in a contextvar for use by `core.logging.RequestContextFilter`.
- Opens a fresh anonymous principal scope for the request and restores the prior
  one afterwards. DRF views bind the authenticated principal inside that scope
  (`authz.identity.BindPrincipalMixin`); whatever they bind cannot leak into the
  next request served by the same thread.
- Logs one structured line per request including latency (ms) and user id.
"""

from __future__ import annotations

import logging
import re
import time
import uuid
from typing import Callable

from django.http import HttpRequest, HttpResponse

from authz.identity import principal_var

from .logging import request_id_var

logger = logging.getLogger("property_finder.request")

# Allow simple, safe request-id tokens coming from clients
_ALLOWED_CHARS = re.compile(r"^[A-Za-z0-9._\-]{1,200}$")


def _coerce_request_id(raw: str | None) -> str:
    """Keep a safe client-provided request id, or generate a uuid4 hex."""
    if raw and _ALLOWED_CHARS.match(raw):
        return raw
    return uuid.uuid4().hex


class RequestIDLogMiddleware:
    """Request id + principal scope + one structured access line per request."""

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        rid = _coerce_request_id(request.headers.get("X-Request-ID"))
        setattr(request, "request_id", rid)
        rid_token = request_id_var.set(rid)
        principal_token = principal_var.set(None)

        start = time.perf_counter()
        try:
            response = self.get_response(request)
        finally:
            principal_var.reset(principal_token)
            request_id_var.reset(rid_token)
        duration_ms = int((time.perf_counter() - start) * 1000)

        response.headers["X-Request-ID"] = rid

        # Only when authenticated; avoids touching the session for anonymous calls
        user = getattr(request, "user", None)
        user_id = getattr(user, "id", None) if getattr(user, "is_authenticated", False) else None

        logger.info(
            "request",
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.path,
                "status": getattr(response, "status_code", 0),
                "user_id": user_id,
                "duration_ms": duration_ms,
            },
        )
        return response
