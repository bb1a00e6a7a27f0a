"""
Decision values produced by policy rules.

A rule never raises to deny; it returns `Deny(reason)` and lets the interceptor
decide what to do with it. `Permit` and `Deny` compare by type and reason, so
evaluating the same rule twice on the same inputs yields equal decisions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class Decision:
    """Outcome of a single rule evaluation."""
    reason: str
    permitted: ClassVar[bool] = False

    def __bool__(self) -> bool:
        return self.permitted


@dataclass(frozen=True)
class Permit(Decision):
    permitted: ClassVar[bool] = True


@dataclass(frozen=True)
class Deny(Decision):
    permitted: ClassVar[bool] = False


@dataclass(frozen=True)
class Operation:
    """
    Identity of an intercepted call, handed to rules.

    `action` is the verb the rule table is keyed on ("update", "delete"); rules use
    it to phrase their denial reason.
    """
    service: str
    method: str
    action: str

    def __str__(self) -> str:
        return f"{self.service}.{self.method}"
