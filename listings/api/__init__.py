# Explicit re-exports for router imports like:
#   from listings.api import BookmarkViewSet, PropertyViewSet, ReviewViewSet

from .viewsets import BookmarkViewSet, PropertyViewSet, ReviewViewSet

__all__ = [
    "BookmarkViewSet",
    "PropertyViewSet",
    "ReviewViewSet",
]
