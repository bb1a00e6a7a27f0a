"""
Declarative policy table and the weaving of interceptors into services.

Shape
-----
- A service class opts in with `@policies.service("properties")`. Nothing is
  wrapped at that point; the class is only recorded.
- Bindings are declared with `policies.bind(Selector("properties", "update*"), ...)`.
  The selector matches method *names* with `fnmatch`, so a new `delete_*` method on
  a guarded service is covered without anyone remembering to add a check.
- `policies.seal()` runs once at startup (`AuthzConfig.ready()`): it validates
  the table, wraps every matched method with its interceptor and freezes the
  registry. Any inconsistency raises `PolicyConfigurationError` there, never at
  request time.

After sealing the table is read-only; request threads read it without locking.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from typing import Any, Callable, Dict, List, Optional, Tuple

from .decisions import Operation
from .exceptions import PolicyConfigurationError, TargetExtractionError
from .identity import resolve_user as _resolve_user
from .interceptor import intercept
from .rules import Rule

logger = logging.getLogger(__name__)

_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True)
class Selector:
    """Matches methods of one registered service by name pattern."""
    service: str
    pattern: str

    def matches(self, service: str, method: str) -> bool:
        return service == self.service and fnmatchcase(method, self.pattern)

    def __str__(self) -> str:
        return f"{self.service}.{self.pattern}"


@dataclass(frozen=True)
class PositionalArgument:
    """
    Extracts the target id from the N-th argument after `self` (or `cls`; static
    methods have neither).

    The argument is found whether the caller passed it positionally or by keyword.
    """
    index: int = 0

    def parameter_name(self, signature: inspect.Signature, bound: int = 1) -> str:
        params = [p for p in signature.parameters.values() if p.kind in _POSITIONAL_KINDS]
        # the first `bound` params are `self`/`cls`
        if len(params) <= self.index + bound:
            raise PolicyConfigurationError(
                f"No positional argument #{self.index} in signature {signature}"
            )
        return params[self.index + bound].name

    def check(self, func: Callable, bound: int = 1) -> None:
        self.parameter_name(inspect.signature(func), bound)

    def extract(self, signature: inspect.Signature, args: tuple, kwargs: dict, bound: int = 1) -> Any:
        try:
            arguments = signature.bind(*args, **kwargs).arguments
            return arguments[self.parameter_name(signature, bound)]
        except (TypeError, KeyError, PolicyConfigurationError) as exc:
            raise TargetExtractionError(str(exc)) from exc


def positional(index: int = 0) -> PositionalArgument:
    return PositionalArgument(index)


@dataclass(frozen=True)
class PolicyBinding:
    """One row of the policy table."""
    selector: Selector
    rule: Rule
    lookup: Callable[[Any], Any]
    action: str
    not_found: str
    extractor: PositionalArgument = field(default_factory=positional)

    def __str__(self) -> str:
        return f"{self.selector} -> {getattr(self.rule, '__name__', self.rule)}"


class PolicyRegistry:
    """Owns every `PolicyBinding` and the services they guard."""

    def __init__(self, resolve_user: Optional[Callable] = None) -> None:
        self._bindings: List[PolicyBinding] = []
        self._services: Dict[str, type] = {}
        self._resolve_user = resolve_user or _resolve_user
        self._sealed = False
        self._guarded = 0

    # ---------- declaration ----------

    def bind(
        self,
        selector: Selector,
        *,
        rule: Rule,
        lookup: Callable[[Any], Any],
        action: str,
        not_found: str,
        extractor: Optional[PositionalArgument] = None,
    ) -> PolicyBinding:
        """Add a binding; the same selector may only be bound once."""
        self._ensure_open()
        if any(b.selector == selector for b in self._bindings):
            raise PolicyConfigurationError(f"Duplicate policy selector: {selector}")
        binding = PolicyBinding(
            selector=selector,
            rule=rule,
            lookup=lookup,
            action=action,
            not_found=not_found,
            extractor=extractor or positional(),
        )
        self._bindings.append(binding)
        return binding

    def service(self, name: str) -> Callable[[type], type]:
        """Class decorator recording `cls` as the guarded service `name`."""

        def register(cls: type) -> type:
            self._ensure_open()
            existing = self._services.get(name)
            if existing is not None and existing is not cls:
                raise PolicyConfigurationError(
                    f"Service name {name!r} already used by {existing.__qualname__}"
                )
            self._services[name] = cls
            cls.__policy_service__ = name
            return cls

        return register

    # ---------- startup ----------

    def seal(self) -> int:
        """
        Validate the table and weave interceptors into matched methods.

        Returns the number of guarded methods. Calling it again is a no-op, so
        repeated `AppConfig.ready()` runs are safe.
        """
        if self._sealed:
            return self.guarded_count
        plan = self._plan()
        for target in plan:
            cls, name, binding = target.cls, target.name, target.binding
            op = Operation(service=cls.__policy_service__, method=name, action=binding.action)
            guarded = intercept(binding, op, target.func, resolve_user=self._resolve_user, bound=target.bound)
            setattr(cls, name, target.descriptor(guarded) if target.descriptor else guarded)
            logger.debug("Guarding %s with %s", op, binding)
        self._guarded = len(plan)
        self._sealed = True
        return self._guarded

    def _plan(self) -> List["_Target"]:
        for binding in self._bindings:
            if binding.selector.service not in self._services:
                raise PolicyConfigurationError(
                    f"Selector {binding.selector} names an unregistered service"
                )

        plan = []
        for service_name, cls in self._services.items():
            for name, attr in _public_members(cls):
                matched = [b for b in self._bindings if b.selector.matches(service_name, name)]
                if not matched:
                    continue
                if len(matched) > 1:
                    selectors = ", ".join(str(b.selector) for b in matched)
                    raise PolicyConfigurationError(
                        f"{service_name}.{name} is covered by more than one policy: {selectors}"
                    )
                binding = matched[0]
                target = _Target.of(cls, name, attr, binding)
                if target is None:
                    raise PolicyConfigurationError(
                        f"{service_name}.{name} matches {binding.selector} but is not a plain, "
                        f"static or class method ({type(attr).__name__}); it cannot be guarded"
                    )
                try:
                    binding.extractor.check(target.func, target.bound)
                except PolicyConfigurationError as exc:
                    raise PolicyConfigurationError(
                        f"{service_name}.{name} does not fit the argument extractor of {binding.selector}: {exc}"
                    ) from exc
                plan.append(target)

        for binding in self._bindings:
            if not any(t.binding is binding for t in plan):
                logger.warning("Policy %s matches no method", binding.selector)
        return plan

    # ---------- introspection ----------

    @property
    def sealed(self) -> bool:
        return self._sealed

    @property
    def guarded_count(self) -> int:
        return self._guarded

    @property
    def bindings(self) -> Tuple[PolicyBinding, ...]:
        return tuple(self._bindings)

    def binding_for(self, service: str, method: str) -> Optional[PolicyBinding]:
        for binding in self._bindings:
            if binding.selector.matches(service, method):
                return binding
        return None

    def _ensure_open(self) -> None:
        if self._sealed:
            raise PolicyConfigurationError("Policy registry is sealed; register policies at import time")


@dataclass(frozen=True)
class _Target:
    """A matched class member, unwrapped to the function the interceptor wraps."""
    cls: type
    name: str
    func: Callable
    descriptor: Optional[type]
    bound: int
    binding: PolicyBinding

    @classmethod
    def of(cls, owner: type, name: str, attr: Any, binding: PolicyBinding) -> Optional["_Target"]:
        if inspect.isfunction(attr):
            return cls(owner, name, attr, None, 1, binding)
        if isinstance(attr, (staticmethod, classmethod)) and inspect.isfunction(attr.__func__):
            bound = 0 if isinstance(attr, staticmethod) else 1
            return cls(owner, name, attr.__func__, type(attr), bound, binding)
        return None


def _public_members(cls: type):
    """Every attribute reachable on `cls` (own and inherited), excluding private names."""
    for name in dir(cls):
        if name.startswith("_"):
            continue
        yield name, inspect.getattr_static(cls, name)


# Project-wide table, sealed by `authz.apps.AuthzConfig.ready()`.
policies = PolicyRegistry()
