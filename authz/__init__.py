# Public surface of the authorization layer:
#   from authz import policies, Selector, Permit, Deny, principal_scope, ...
# Policy tables live in `<app>/policies.py` and are discovered at startup.

from .decisions import Decision, Deny, Operation, Permit
from .exceptions import DENIALS, AccessDenied, PolicyConfigurationError, Unauthenticated
from .identity import BindPrincipalMixin, Principal, current_principal, principal_scope, resolve_current
from .registry import PolicyBinding, PolicyRegistry, Selector, policies, positional

__all__ = [
    "Decision",
    "Deny",
    "Operation",
    "Permit",
    "DENIALS",
    "AccessDenied",
    "PolicyConfigurationError",
    "Unauthenticated",
    "BindPrincipalMixin",
    "Principal",
    "current_principal",
    "principal_scope",
    "resolve_current",
    "PolicyBinding",
    "PolicyRegistry",
    "Selector",
    "policies",
    "positional",
]
