"""
Ambient request identity and its resolution to a stored user.

Overview
--------
- `principal_var` holds the authenticated caller for the current request (or task).
  It is a `contextvars.ContextVar`, so concurrent requests on other threads or
  tasks never observe each other's principal.
- `BindPrincipalMixin` binds it for DRF views right after DRF authenticates the
  request, and unbinds it once the response is finalized.
- `principal_scope()` binds it explicitly (management commands, shell, tests).

Resolution
----------
The principal only says who the caller claims to be (the subject id, i.e. the
email). `resolve_user()` always re-reads the user store: a deleted account or a
changed role must be seen on the very next call, not when the credential expires.
A store failure propagates unchanged; it is not a denial.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Iterator, Optional

from django.contrib.auth import get_user_model


@dataclass(frozen=True)
class Principal:
    """Authenticated caller as seen by the authorization layer."""
    subject_id: str


principal_var: ContextVar[Optional[Principal]] = ContextVar("principal", default=None)


def current_principal() -> Optional[Principal]:
    return principal_var.get()


def principal_for_user(user) -> Optional[Principal]:
    """Build a principal from a Django/DRF `request.user` (None when anonymous)."""
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    subject = getattr(user, "email", None)
    if not subject:
        return None
    return Principal(subject_id=subject)


@contextmanager
def principal_scope(principal: Optional[Principal]) -> Iterator[Optional[Principal]]:
    """Bind `principal` for the duration of the block, then restore the previous one."""
    token = principal_var.set(principal)
    try:
        yield principal
    finally:
        principal_var.reset(token)


def resolve_user(principal: Principal):
    """Return the stored user bound to `principal`, or None when it no longer exists."""
    User = get_user_model()
    return User.objects.filter(email=principal.subject_id).first()


def resolve_current():
    """Resolve the ambient principal to a stored user; None means unauthenticated."""
    principal = current_principal()
    if principal is None:
        return None
    return resolve_user(principal)


class BindPrincipalMixin:
    """
    DRF view mixin that exposes `request.user` as the ambient principal.

    DRF authenticates inside `initial()`, after Django middleware has run, so the
    binding has to happen here rather than in middleware. `finalize_response()`
    runs on every path (success, handled exception), which makes it the unbind
    point.
    """

    _principal_token = None

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        self._principal_token = principal_var.set(principal_for_user(request.user))

    def finalize_response(self, request, response, *args, **kwargs):
        token, self._principal_token = self._principal_token, None
        if token is not None:
            principal_var.reset(token)
        return super().finalize_response(request, response, *args, **kwargs)
