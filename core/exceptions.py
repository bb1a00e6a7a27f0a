"""
DRF exception handler.

- Adds a machine-readable `code` next to `detail` on every DRF error body, e.g.
  `{"detail": "You can only update your own properties", "code": "forbidden"}`.
  Clients tell 401 `not_authenticated` apart from 403 `forbidden` by status and code.
- Maps store failures (`django.db.DatabaseError`, which includes driver timeouts
  and lost connections) to 503. These are transient: they are reported as such and
  never disguised as a denial or a success.

Configured through `REST_FRAMEWORK["EXCEPTION_HANDLER"]`.
"""

from __future__ import annotations

import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    if isinstance(exc, DatabaseError):
        view = context.get("view")
        logger.error("Store unavailable in %s: %s", view.__class__.__name__ if view else "-", exc)
        return Response(
            {"detail": "Service temporarily unavailable.", "code": "store_unavailable"},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    response = exception_handler(exc, context)
    if response is None:
        return None

    data = response.data
    if isinstance(data, dict) and "detail" in data and "code" not in data:
        code = getattr(data["detail"], "code", None)
        if code:
            data["code"] = code
    return response
