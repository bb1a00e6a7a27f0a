"""
AppConfig for the `listings` domain app (properties and reviews).

The policy table in `listings.policies` is discovered and sealed by the `authz`
app at startup; nothing needs to be imported here.
"""

from django.apps import AppConfig


class ListingsConfig(AppConfig):
    """Primary app configuration for listing models and APIs."""
    default_auto_field = "django.db.models.BigAutoField"
    name = "listings"
