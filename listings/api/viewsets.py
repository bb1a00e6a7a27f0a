"""
ViewSets for properties, reviews and bookmarks.

Authorization
-------------
- Property and review reads are public; writes require an authenticated caller
  (`IsAuthenticatedOrReadOnly`). Every bookmark endpoint requires authentication.
- Who may update/delete *which* row is not decided here. Update and destroy call
  the guarded service methods with the id from the URL, and the interceptor in
  front of them permits or denies. Views never pre-fetch the target, so a
  non-owner asking for a missing id gets the same 403 as for an existing one.
- `BindPrincipalMixin` publishes the authenticated caller as the ambient principal
  the interceptor reads.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.response import Response

from authz import BindPrincipalMixin
from core.schema import GUARDED_WRITE_RESPONSES
from listings.filters import PropertyFilter, ReviewFilter
from listings.serializers import (
    BookmarkCheckSerializer,
    BookmarkSerializer,
    PropertySerializer,
    ReviewSerializer,
    ReviewUpdateSerializer,
)
from listings.services import BookmarkService, PropertyService, ReviewService


class GuardedModelViewSet(BindPrincipalMixin, viewsets.ModelViewSet):
    """
    Base ViewSet routing writes through a guarded service.

    Subclasses set `service` and implement `_update()`, `_destroy()`, `_create()`.
    """
    lookup_value_regex = r"\d+"
    permission_classes = [IsAuthenticatedOrReadOnly]
    service = None

    def _target_id(self) -> int:
        return int(self.kwargs[self.lookup_url_kwarg or self.lookup_field])

    def get_input_serializer(self, *args, **kwargs):
        return self.get_serializer(*args, **kwargs)

    def perform_create(self, serializer):
        serializer.instance = self._create(serializer.validated_data)

    def update(self, request, *args, **kwargs):
        """Validate the payload, then hand it to the guarded service method."""
        partial = kwargs.pop("partial", False)
        serializer = self.get_input_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        instance = self._update(self._target_id(), serializer.validated_data)
        return Response(self.get_serializer(instance).data)

    def destroy(self, request, *args, **kwargs):
        self._destroy(self._target_id())
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema_view(
    list=extend_schema(tags=["Properties"], description="List properties (public)."),
    retrieve=extend_schema(tags=["Properties"], description="Retrieve a property."),
    create=extend_schema(tags=["Properties"], description="Create a property owned by the caller."),
    update=extend_schema(
        tags=["Properties"], description="Update a property (owner or admin).", responses={200: PropertySerializer, **GUARDED_WRITE_RESPONSES}
    ),
    partial_update=extend_schema(
        tags=["Properties"], description="Partially update a property (owner or admin).", responses={200: PropertySerializer, **GUARDED_WRITE_RESPONSES}
    ),
    destroy=extend_schema(
        tags=["Properties"], description="Delete a property (owner or admin).", responses={204: None, **GUARDED_WRITE_RESPONSES}
    ),
)
class PropertyViewSet(GuardedModelViewSet):
    """Property CRUD with search, filters and ordering."""
    service = PropertyService()
    serializer_class = PropertySerializer
    filterset_class = PropertyFilter
    search_fields = ["title", "description", "location"]
    ordering_fields = ["price", "created_at", "updated_at", "bedrooms", "area"]
    ordering = ["-created_at"]

    def get_queryset(self):
        return self.service.list_properties()

    def _create(self, data):
        return self.service.create_property(self.request.user, data)

    def _update(self, property_id, data):
        return self.service.update_property(property_id, data)

    def _destroy(self, property_id):
        self.service.delete_property(property_id)

    @extend_schema(tags=["Properties"], description="Search properties by location, type, bedrooms and price range.")
    @action(detail=False, methods=["get"])
    def search(self, request, *args, **kwargs):
        return self.list(request, *args, **kwargs)


@extend_schema_view(
    list=extend_schema(tags=["Reviews"], description="List reviews (public)."),
    retrieve=extend_schema(tags=["Reviews"], description="Retrieve a review."),
    create=extend_schema(tags=["Reviews"], description="Review a property as the caller (one per property)."),
    update=extend_schema(
        tags=["Reviews"], request=ReviewUpdateSerializer, description="Update a review (author or admin).",
        responses={200: ReviewSerializer, **GUARDED_WRITE_RESPONSES},
    ),
    partial_update=extend_schema(
        tags=["Reviews"], request=ReviewUpdateSerializer, description="Partially update a review (author or admin).",
        responses={200: ReviewSerializer, **GUARDED_WRITE_RESPONSES},
    ),
    destroy=extend_schema(
        tags=["Reviews"], description="Delete a review (author, property owner or admin).",
        responses={204: None, **GUARDED_WRITE_RESPONSES},
    ),
)
class ReviewViewSet(GuardedModelViewSet):
    """Review CRUD; reviews of one property are also served under `property/{id}/`."""
    service = ReviewService()
    serializer_class = ReviewSerializer
    filterset_class = ReviewFilter
    search_fields = ["comment"]
    ordering_fields = ["rating", "created_at", "updated_at"]
    ordering = ["-created_at"]

    def get_queryset(self):
        return self.service.list_reviews()

    def get_input_serializer(self, *args, **kwargs):
        kwargs.setdefault("context", self.get_serializer_context())
        return ReviewUpdateSerializer(*args, **kwargs)

    def _create(self, data):
        return self.service.create_review(self.request.user, data)

    def _update(self, review_id, data):
        return self.service.update_review(review_id, data)

    def _destroy(self, review_id):
        self.service.delete_review(review_id)

    @extend_schema(
        tags=["Reviews"],
        description="Reviews of one property, newest first.",
        parameters=[OpenApiParameter("property_id", int, OpenApiParameter.PATH)],
        responses=ReviewSerializer(many=True),
    )
    @action(detail=False, methods=["get"], url_path=r"property/(?P<property_id>\d+)")
    def by_property(self, request, property_id=None):
        qs = self.filter_queryset(self.service.reviews_for_property(int(property_id)))
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(qs, many=True).data)


USER_ID = OpenApiParameter("user_id", int, OpenApiParameter.PATH)
PROPERTY_ID = OpenApiParameter("property_id", int, OpenApiParameter.PATH)


@extend_schema_view(
    create=extend_schema(tags=["Bookmarks"], description="Bookmark a property for the caller (once per property)."),
)
class BookmarkViewSet(BindPrincipalMixin, mixins.CreateModelMixin, viewsets.GenericViewSet):
    """
    Bookmarks, addressed by (user id, property id) rather than by bookmark id.

    Listing, checking and removing go through guarded service methods whose target
    is the user in the URL, so callers only reach their own bookmarks unless ADMIN.
    """
    permission_classes = [IsAuthenticated]
    serializer_class = BookmarkSerializer
    service = BookmarkService()

    def get_queryset(self):
        return self.service.list_bookmarks()

    def perform_create(self, serializer):
        serializer.instance = self.service.create_bookmark(
            self.request.user, serializer.validated_data["property"]
        )

    @extend_schema(
        tags=["Bookmarks"],
        description="Bookmarks of one user, newest first (that user or admin).",
        parameters=[USER_ID],
        responses={200: BookmarkSerializer(many=True), **GUARDED_WRITE_RESPONSES},
    )
    @action(detail=False, methods=["get"], url_path=r"user/(?P<user_id>\d+)")
    def for_user(self, request, user_id=None):
        qs = self.service.bookmarks_for_user(int(user_id))
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(qs, many=True).data)

    @extend_schema(
        tags=["Bookmarks"],
        description="Remove a bookmark (its owner or admin).",
        parameters=[USER_ID, PROPERTY_ID],
        responses={204: None, **GUARDED_WRITE_RESPONSES},
    )
    @action(
        detail=False,
        methods=["delete"],
        url_path=r"user/(?P<user_id>\d+)/property/(?P<property_id>\d+)",
    )
    def remove(self, request, user_id=None, property_id=None):
        self.service.delete_bookmark(int(user_id), int(property_id))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        tags=["Bookmarks"],
        description="Whether the user bookmarked the property (that user or admin).",
        parameters=[USER_ID, PROPERTY_ID],
        responses={200: BookmarkCheckSerializer, **GUARDED_WRITE_RESPONSES},
    )
    @action(detail=False, methods=["get"], url_path=r"check/(?P<user_id>\d+)/(?P<property_id>\d+)")
    def check(self, request, user_id=None, property_id=None):
        bookmarked = self.service.is_bookmarked(int(user_id), int(property_id))
        return Response(BookmarkCheckSerializer({"bookmarked": bookmarked}).data)
