"""AppConfig for the `authz` app.

Startup responsibilities
------------------------
- Import the `policies` module of every installed app (the same discovery Django
  admin uses for `admin` modules). Those modules declare bindings and import the
  services they guard.
- Seal the project-wide registry, weaving interceptors into guarded methods. A
  broken policy table raises `PolicyConfigurationError` here and the process does
  not start.
"""

from __future__ import annotations

import logging

from django.apps import AppConfig
from django.utils.module_loading import autodiscover_modules

logger = logging.getLogger(__name__)


class AuthzConfig(AppConfig):
    """Authorization interception layer; owns no models."""
    name = "authz"
    verbose_name = "Authorization"

    def ready(self) -> None:
        from .registry import policies

        autodiscover_modules("policies")
        guarded = policies.seal()
        logger.debug("Policy registry sealed: %d guarded methods", guarded)
