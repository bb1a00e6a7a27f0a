"""
Before-advice for guarded service methods.

Per call, strictly before the method body:

1. No ambient principal            -> `Unauthenticated("Not authenticated")`
2. Principal not bound to a user   -> `AccessDenied("User not found")`
3. Target id not extractable       -> `AccessDenied` (fail closed)
4. Acting user is ADMIN            -> proceed (the target is not even looked up)
5. Target absent                   -> `AccessDenied(<binding.not_found>)`
6. Rule returns `Deny`             -> `AccessDenied(<rule reason>)`
7. Rule returns `Permit`           -> proceed

Nothing here catches store errors: a failed user or entity lookup propagates as
is, so callers can tell "the store is down" apart from "you may not".

The interceptor keeps no state between calls; everything it reads comes from the
binding (immutable) and the ambient principal (per request).
"""

from __future__ import annotations

import functools
import inspect
import logging
from typing import Any, Callable, Optional

from .decisions import Decision, Operation, Permit
from .exceptions import AccessDenied, TargetExtractionError, Unauthenticated
from .identity import current_principal
from .rules import is_admin

logger = logging.getLogger(__name__)

CANNOT_IDENTIFY_TARGET = "Unable to identify the target of this operation"


class Interceptor:
    """Authorization check for one guarded method."""

    def __init__(self, binding, operation: Operation, func: Callable, resolve_user: Callable, bound: int = 1):
        self.binding = binding
        self.operation = operation
        self.signature = inspect.signature(func)
        self.resolve_user = resolve_user
        # Leading arguments that are not call arguments: `self`/`cls`, none for static methods.
        self.bound = bound

    def check(self, args: tuple, kwargs: dict) -> Decision:
        """
        Return the permitting decision or raise a denial.

        `args` are exactly what the wrapped function receives: the instance (or class)
        first, except for static methods.
        """
        op = self.operation
        logger.debug("Checking authorization for %s", op, extra={"operation": str(op)})

        principal = current_principal()
        if principal is None:
            self._log_denial("Not authenticated", None, None)
            raise Unauthenticated()

        user = self.resolve_user(principal)
        if user is None:
            logger.warning(
                "User not found for subject: %s", principal.subject_id,
                extra={"operation": str(op)},
            )
            raise AccessDenied("User not found")

        try:
            target_id = self.binding.extractor.extract(self.signature, args, kwargs, bound=self.bound)
        except TargetExtractionError:
            self._log_denial(CANNOT_IDENTIFY_TARGET, user.id, None)
            raise AccessDenied(CANNOT_IDENTIFY_TARGET, user_id=user.id)

        if is_admin(user):
            logger.debug("Admin access granted for %s", op, extra={"operation": str(op)})
            return Permit("Admin access")

        target = self.binding.lookup(target_id)
        if target is None:
            self._deny(self.binding.not_found, user.id, target_id)

        decision = self.binding.rule(user, target, op)
        if not decision.permitted:
            self._deny(decision.reason, user.id, target_id)

        logger.debug("Access granted for %s: %s", op, decision.reason, extra={"operation": str(op)})
        return decision

    def _deny(self, reason: str, user_id: Any, target_id: Any) -> None:
        self._log_denial(reason, user_id, target_id)
        raise AccessDenied(reason, user_id=user_id, target_id=target_id)

    def _log_denial(self, reason: str, user_id: Any, target_id: Any) -> None:
        logger.warning(
            "Access denied: user %s attempted %s on %s (%s)",
            user_id, self.operation, target_id, reason,
            extra={"user_id": user_id, "target_id": target_id, "operation": str(self.operation)},
        )


def intercept(binding, operation: Operation, func: Callable, *, resolve_user: Callable, bound: int = 1) -> Callable:
    """Wrap `func` so that the binding's check runs before every call."""
    interceptor = Interceptor(binding, operation, func, resolve_user, bound)

    @functools.wraps(func)
    def guarded(*args, **kwargs):
        interceptor.check(args, kwargs)
        return func(*args, **kwargs)

    guarded.__interceptor__ = interceptor
    return guarded


def interceptor_of(method) -> Optional[Interceptor]:
    """Return the interceptor woven into `method`, or None when it is unguarded."""
    return getattr(method, "__interceptor__", None)
