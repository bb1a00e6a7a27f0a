"""
Service layer for properties, reviews and bookmarks.

Every `update*`/`delete*` method of these services is guarded: `listings.policies`
binds them in the project-wide policy table and `authz` weaves an interceptor in
front of each at startup. Method bodies therefore contain no authorization code;
they start from the assumption that the caller was permitted.

Conventions
-----------
- The target id is always the first argument after `self`; the policy table
  extracts it from there.
- A permitted call whose target does not exist (only reachable by an ADMIN, since
  the interceptor denies others first) raises `Http404`.
- `BookmarkService` addresses bookmarks by (user id, property id); its guarded
  methods take the bookmark owner's id first.
- `create*` methods are not guarded: ownership/authorship is assigned by the method
  itself from the caller passed in.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable

from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError
from rest_framework.generics import get_object_or_404

from authz import policies

from .models import Bookmark, Property, Review

PROPERTY_FIELDS = (
    "title",
    "description",
    "price",
    "location",
    "bedrooms",
    "bathrooms",
    "area",
    "property_type",
    "listing_type",
)

# `author` and `property` are fixed at creation.
REVIEW_FIELDS = ("rating", "comment")

DUPLICATE_REVIEW = "You have already reviewed this property."
DUPLICATE_BOOKMARK = "You have already bookmarked this property."


def _pick(data: Dict[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if k in fields}


@policies.service("properties")
class PropertyService:
    """Property listings."""

    def list_properties(self):
        return Property.objects.select_related("owner")

    def get_property(self, property_id) -> Property:
        return get_object_or_404(self.list_properties(), pk=property_id)

    def create_property(self, owner, data: Dict[str, Any]) -> Property:
        return Property.objects.create(owner=owner, **_pick(data, PROPERTY_FIELDS))

    @transaction.atomic
    def update_property(self, property_id, data: Dict[str, Any]) -> Property:
        prop = get_object_or_404(Property.objects.select_related("owner"), pk=property_id)
        changes = _pick(data, PROPERTY_FIELDS)
        for field, value in changes.items():
            setattr(prop, field, value)
        prop.save()
        return prop

    @transaction.atomic
    def delete_property(self, property_id) -> None:
        prop = get_object_or_404(Property, pk=property_id)
        prop.delete()


@policies.service("reviews")
class ReviewService:
    """Reviews left by users on properties."""

    def list_reviews(self):
        return Review.objects.select_related("author", "property")

    def get_review(self, review_id) -> Review:
        return get_object_or_404(self.list_reviews(), pk=review_id)

    def reviews_for_property(self, property_id):
        return self.list_reviews().filter(property_id=property_id)

    def create_review(self, author, data: Dict[str, Any]) -> Review:
        """
        Create a review authored by `author`.

        Raises:
            ValidationError: `author` already reviewed this property.
        """
        prop = data["property"]
        if Review.objects.filter(author=author, property=prop).exists():
            raise ValidationError({"property": [DUPLICATE_REVIEW]})
        try:
            with transaction.atomic():
                return Review.objects.create(author=author, property=prop, **_pick(data, REVIEW_FIELDS))
        except IntegrityError:
            # Lost a race with a concurrent create for the same pair.
            raise ValidationError({"property": [DUPLICATE_REVIEW]})

    @transaction.atomic
    def update_review(self, review_id, data: Dict[str, Any]) -> Review:
        review = get_object_or_404(self.list_reviews(), pk=review_id)
        for field, value in _pick(data, REVIEW_FIELDS).items():
            setattr(review, field, value)
        review.save()
        return review

    @transaction.atomic
    def delete_review(self, review_id) -> None:
        review = get_object_or_404(Review, pk=review_id)
        review.delete()


@policies.service("bookmarks")
class BookmarkService:
    """Properties saved by users."""

    def list_bookmarks(self):
        return Bookmark.objects.select_related("user", "property")

    def bookmarks_for_user(self, user_id):
        return self.list_bookmarks().filter(user_id=user_id)

    def is_bookmarked(self, user_id, property_id) -> bool:
        return Bookmark.objects.filter(user_id=user_id, property_id=property_id).exists()

    def create_bookmark(self, user, prop: Property) -> Bookmark:
        """
        Bookmark `prop` for `user`.

        Raises:
            ValidationError: the property is already bookmarked by `user`.
        """
        if Bookmark.objects.filter(user=user, property=prop).exists():
            raise ValidationError({"property": [DUPLICATE_BOOKMARK]})
        try:
            with transaction.atomic():
                return Bookmark.objects.create(user=user, property=prop)
        except IntegrityError:
            raise ValidationError({"property": [DUPLICATE_BOOKMARK]})

    @transaction.atomic
    def delete_bookmark(self, user_id, property_id) -> None:
        bookmark = get_object_or_404(Bookmark, user_id=user_id, property_id=property_id)
        bookmark.delete()
