"""
Building blocks for policy rules.

A rule is a pure callable `(acting_user, target, operation) -> Decision`. It must
not touch the database or any other I/O: the interceptor hands it a fully loaded
target, and the same inputs always produce the same decision.

Helpers here never raise on missing links. `refers_to(user, review, "property.owner")`
is simply False when the review has no property or the property has no owner, so a
rule can fall through to its next disjunct.
"""

from __future__ import annotations

from typing import Any, Callable

from .decisions import Decision, Operation

ADMIN_ROLE = "ADMIN"

Rule = Callable[[Any, Any, Operation], Decision]


def is_admin(user) -> bool:
    """Exact role match; there is no hierarchy beyond USER/ADMIN."""
    return user is not None and getattr(user, "role", None) == ADMIN_ROLE


def follow(obj, path: str):
    """Walk a dotted attribute path, returning None at the first missing link."""
    for name in path.split("."):
        if obj is None:
            return None
        obj = getattr(obj, name, None)
    return obj


def refers_to(user, target, path: str) -> bool:
    """True when `target.<path>` is a user with the same id as `user`."""
    if user is None:
        return False
    related = follow(target, path)
    if related is None:
        return False
    related_id = getattr(related, "id", None)
    return related_id is not None and related_id == user.id
