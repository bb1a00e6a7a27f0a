"""Django AppConfig for the accounts app.

Houses the custom user model (`accounts.User`), the session/token auth endpoints
and the `/api/users/` resource.
"""

from django.apps import AppConfig


class AccountsConfig(AppConfig):
    """Standard Django app config; uses BigAutoField as the default PK type."""
    default_auto_field = "django.db.models.BigAutoField"
    name = "accounts"
