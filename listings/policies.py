"""
Policy table for listings.

| Operation                          | Permit iff                                              |
|------------------------------------|---------------------------------------------------------|
| PropertyService.update*            | ADMIN, or the property's owner                          |
| PropertyService.delete*            | ADMIN, or the property's owner                          |
| ReviewService.update*              | ADMIN, or the review's author                           |
| ReviewService.delete*              | ADMIN, or the review's author, or the property's owner  |
| BookmarkService.delete*            | ADMIN, or the bookmark owner                            |
| BookmarkService.bookmarks_for_user | ADMIN, or the bookmark owner                            |
| BookmarkService.is_bookmarked      | ADMIN, or the bookmark owner                            |

Creation is intentionally absent: services assign the owner/author themselves.
Bookmark operations target the user whose bookmarks they touch (first argument),
not a bookmark row.

This module is imported by `authz` at startup (it discovers `policies` modules of
every installed app) before the registry is sealed.
"""

from __future__ import annotations

from authz import Deny, Permit, Selector, policies
from authz.rules import is_admin, refers_to

from . import services  # noqa: F401  (registers the guarded services)
from .lookups import find_bookmark_owner, find_property, find_review


def property_owner_or_admin(acting, target, op):
    if is_admin(acting):
        return Permit("Admin access")
    if refers_to(acting, target, "owner"):
        return Permit("Property owner")
    return Deny(f"You can only {op.action} your own properties")


def review_author_or_admin(acting, target, op):
    if is_admin(acting):
        return Permit("Admin access")
    if refers_to(acting, target, "author"):
        return Permit("Review author")
    return Deny(f"You can only {op.action} your own reviews")


def review_author_property_owner_or_admin(acting, target, op):
    if is_admin(acting):
        return Permit("Admin access")
    if refers_to(acting, target, "author"):
        return Permit("Review author")
    if refers_to(acting, target, "property.owner"):
        return Permit("Property owner")
    return Deny("You can only delete your own reviews or reviews on your properties")


def bookmark_owner_or_admin(acting, target, op):
    if is_admin(acting):
        return Permit("Admin access")
    if acting is not None and target.id == acting.id:
        return Permit("Bookmark owner")
    return Deny(f"You can only {op.action} your own bookmarks")


policies.bind(
    Selector("properties", "update*"),
    rule=property_owner_or_admin,
    lookup=find_property,
    action="update",
    not_found="Property not found",
)
policies.bind(
    Selector("properties", "delete*"),
    rule=property_owner_or_admin,
    lookup=find_property,
    action="delete",
    not_found="Property not found",
)
policies.bind(
    Selector("reviews", "update*"),
    rule=review_author_or_admin,
    lookup=find_review,
    action="update",
    not_found="Review not found",
)
policies.bind(
    Selector("reviews", "delete*"),
    rule=review_author_property_owner_or_admin,
    lookup=find_review,
    action="delete",
    not_found="Review not found",
)
policies.bind(
    Selector("bookmarks", "delete*"),
    rule=bookmark_owner_or_admin,
    lookup=find_bookmark_owner,
    action="delete",
    not_found="Bookmark owner not found",
)
policies.bind(
    Selector("bookmarks", "bookmarks_for_user"),
    rule=bookmark_owner_or_admin,
    lookup=find_bookmark_owner,
    action="view",
    not_found="Bookmark owner not found",
)
policies.bind(
    Selector("bookmarks", "is_bookmarked"),
    rule=bookmark_owner_or_admin,
    lookup=find_bookmark_owner,
    action="check",
    not_found="Bookmark owner not found",
)
