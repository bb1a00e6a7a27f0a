"""
Errors raised by the authorization layer.

HTTP mapping
------------
- `Unauthenticated` subclasses DRF's `NotAuthenticated` -> 401 (the project lists
  `TokenAuthentication` first so DRF can emit a `WWW-Authenticate` header).
- `AccessDenied` subclasses DRF's `PermissionDenied` -> 403. Missing targets are
  reported through it as well so the response never reveals whether a row exists.
- `PolicyConfigurationError` is raised at startup only and stops the process.

Store failures (`django.db.DatabaseError`) are never wrapped here; they travel up
unchanged and are mapped to 503 by `core.exceptions.api_exception_handler`.
"""

from __future__ import annotations

from typing import Any, Optional

from django.core.exceptions import ImproperlyConfigured
from rest_framework import exceptions


class Unauthenticated(exceptions.NotAuthenticated):
    default_detail = "Not authenticated"
    default_code = "not_authenticated"

    @property
    def reason(self) -> str:
        return str(self.detail)


class AccessDenied(exceptions.PermissionDenied):
    """Identity was resolved but the call may not proceed."""
    default_detail = "Access denied"
    default_code = "forbidden"

    def __init__(self, reason: Optional[str] = None, *, user_id: Any = None, target_id: Any = None):
        super().__init__(detail=reason)
        self.user_id = user_id
        self.target_id = target_id

    @property
    def reason(self) -> str:
        return str(self.detail)


# Anything a guarded call can raise instead of running.
DENIALS = (Unauthenticated, AccessDenied)


class PolicyConfigurationError(ImproperlyConfigured):
    """The policy table cannot be applied as declared."""


class TargetExtractionError(Exception):
    """Call arguments do not carry the target id where the binding expects it."""
