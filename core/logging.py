"""
Logging helpers for request-scoped correlation.

Overview
--------
- Exposes a `contextvars.ContextVar` (`request_id_var`) that stores the current
  request id for the lifetime of the request (set by middleware).
- Provides `RequestContextFilter`, a `logging.Filter` that fills every structured
  key used by the project's formatters (`request_id`, request line fields, and the
  authorization fields `user_id`/`target_id`/`operation`), so a formatter never
  breaks on a record that did not set them, e.g. logs from management commands.

Usage
-----
- `core.middleware.RequestIDLogMiddleware` sets the request id and adds
  `X-Request-ID` to responses.
- Attach the filter to handlers in `LOGGING` (see settings). A dash `"-"` is used
  for any key the emitting code did not provide.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

# Keys referenced by formatters in settings.LOGGING.
STRUCTURED_KEYS = (
    "method",
    "path",
    "status",
    "user_id",
    "duration_ms",
    "target_id",
    "operation",
)


class RequestContextFilter(logging.Filter):
    """Attach the current request id and default every structured key."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()
        for key in STRUCTURED_KEYS:
            if getattr(record, key, None) is None:
                setattr(record, key, "-")
        return True
