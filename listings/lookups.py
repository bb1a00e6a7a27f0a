"""
Read-only entity lookups used by the policy table.

Each lookup loads exactly the relations its rule inspects (`select_related`) so
rule evaluation is pure attribute access, and returns None for any id that does
not name a row, including ids of the wrong type. Store errors are left to
propagate.
"""

from __future__ import annotations

from typing import Any, Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError

from .models import Property, Review


def _first(queryset, pk: Any):
    try:
        return queryset.filter(pk=pk).first()
    except (TypeError, ValueError, ValidationError):
        return None


def find_property(property_id: Any) -> Optional[Property]:
    return _first(Property.objects.select_related("owner"), property_id)


def find_review(review_id: Any) -> Optional[Review]:
    return _first(Review.objects.select_related("author", "property", "property__owner"), review_id)


def find_bookmark_owner(user_id: Any):
    # Bookmark operations target a user's collection, so the entity is the user.
    return _first(get_user_model().objects.all(), user_id)
