"""
Django admin registrations for listings.

Scope & intent
--------------
- Back-office only, for staff operators (`is_staff`). Admin edits go straight to
  the ORM and do not pass through the guarded services; treat admin access as an
  internal tool and do not grant it to non-staff users.
"""

from __future__ import annotations

from django.contrib import admin

from .models import Bookmark, Property, Review


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "location", "property_type", "listing_type", "price", "owner", "created_at")
    list_filter = ("property_type", "listing_type")
    search_fields = ("title", "location", "owner__email")
    raw_id_fields = ("owner",)


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("id", "property", "author", "rating", "created_at")
    list_filter = ("rating",)
    search_fields = ("comment", "author__email", "property__title")
    raw_id_fields = ("author", "property")


@admin.register(Bookmark)
class BookmarkAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "property", "created_at")
    search_fields = ("user__email", "property__title")
    raw_id_fields = ("user", "property")
