"""AppConfig for the `core` app.

Scope
-----
Holds shared infrastructure pieces used across the project:
- middleware (request id, access log line, principal scope),
- logging filter, DRF exception handler,
- timestamped base model, user-record permissions, OpenAPI components.
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Standard Django AppConfig; keep defaults lightweight."""
    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
