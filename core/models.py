"""
Core data models shared across the project.

This module provides:
- `TimeStampedModel`: abstract base carrying `created_at`/`updated_at` audit
  timestamps and newest-first default ordering.

Ownership is *not* modelled here: who may change a row is decided by the policy
table (`<app>/policies.py`) at the service boundary, not by queryset scoping, since
listings are publicly readable.
"""

from django.db import models


class TimeStampedModel(models.Model):
    """
    Abstract base for audit timestamps.

    Fields:
        created_at / updated_at: standard audit timestamps.
    """

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ("-created_at",)

    def __repr__(self) -> str:
        """Debug-friendly representation including id."""
        return f"<{self.__class__.__name__} id={getattr(self, 'id', None)}>"
