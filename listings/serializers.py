"""
DRF serializers for listings.

- Clients never supply `owner` or `author`; views pass the caller to the service,
  which assigns it.
- Review `property` is writable on create only; services ignore it on update.
- A bookmark payload names only the `property`; the user is the caller.
"""

from __future__ import annotations

from rest_framework import serializers

from .models import Bookmark, Property, Review


class PropertySerializer(serializers.ModelSerializer):
    owner_name = serializers.SerializerMethodField()

    class Meta:
        model = Property
        fields = [
            "id",
            "title",
            "description",
            "price",
            "location",
            "bedrooms",
            "bathrooms",
            "area",
            "property_type",
            "listing_type",
            "owner",
            "owner_name",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "owner", "owner_name", "created_at", "updated_at"]

    def get_owner_name(self, obj) -> str:
        return obj.owner.display_name if obj.owner_id else ""


class ReviewSerializer(serializers.ModelSerializer):
    author_name = serializers.SerializerMethodField()
    property = serializers.PrimaryKeyRelatedField(queryset=Property.objects.all())

    class Meta:
        model = Review
        fields = [
            "id",
            "property",
            "rating",
            "comment",
            "author",
            "author_name",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "author", "author_name", "created_at", "updated_at"]
        # Uniqueness of (author, property) is enforced by the service.
        validators = []

    def get_author_name(self, obj) -> str:
        return obj.author.display_name if obj.author_id else "Anonymous User"


class ReviewUpdateSerializer(serializers.ModelSerializer):
    """Payload accepted by PUT/PATCH on a review."""

    class Meta:
        model = Review
        fields = ["rating", "comment"]


class BookmarkSerializer(serializers.ModelSerializer):
    property = serializers.PrimaryKeyRelatedField(queryset=Property.objects.all())
    property_title = serializers.CharField(source="property.title", read_only=True)

    class Meta:
        model = Bookmark
        fields = ["id", "user", "property", "property_title", "created_at"]
        read_only_fields = ["id", "user", "property_title", "created_at"]
        # Uniqueness of (user, property) is enforced by the service.
        validators = []


class BookmarkCheckSerializer(serializers.Serializer):
    bookmarked = serializers.BooleanField()
