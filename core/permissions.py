"""
Permission classes for endpoints that are *not* covered by the policy table.

Property and review mutations are authorized by the interceptor woven into their
services (`authz`). User records are plain CRUD without a service layer, so they
use ordinary DRF permission classes:

- `IsSelfOrAdmin`: object-level guard allowing access only to the user record of
  the caller, or to an ADMIN.

Usage
-----
    permission_classes = [IsAuthenticated, IsSelfOrAdmin]
"""

from rest_framework.permissions import BasePermission

from authz.rules import is_admin


def _authenticated_user(request):
    user = getattr(request, "user", None)
    if user and getattr(user, "is_authenticated", False):
        return user
    return None


class IsSelfOrAdmin(BasePermission):
    """
    Object-level permission: the user record itself, or an ADMIN.

    Notes:
        - Returns False for anonymous or unauthenticated users.
    """

    def has_object_permission(self, request, view, obj) -> bool:
        user = _authenticated_user(request)
        if user is None:
            return False
        return is_admin(user) or getattr(obj, "pk", None) == user.pk
