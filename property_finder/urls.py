"""
Project URL configuration.

Surfaces
--------
- `/admin/`: Django admin (back-office only).
- `/api/`: API surface: auth endpoints plus router-driven ViewSets for users,
  properties, reviews and bookmarks.
- `/api/schema`, `/api/docs`, `/api/redoc`: OpenAPI schema & UIs.
- `/health/`: readiness check (DB + sealed policy table).
"""

from __future__ import annotations

from django.contrib import admin
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularSwaggerView,
    SpectacularRedocView,
)

from accounts.views import CsrfView, LoginView, LogoutView, MeView, UserViewSet
from core.views import health
from listings.api import BookmarkViewSet, PropertyViewSet, ReviewViewSet

# ---------------------------------------------------------------------
# Router
# ---------------------------------------------------------------------
router = DefaultRouter()
router.register(r"users", UserViewSet, basename="user")
router.register(r"properties", PropertyViewSet, basename="property")
router.register(r"reviews", ReviewViewSet, basename="review")
router.register(r"bookmarks", BookmarkViewSet, basename="bookmark")

# ---------------------------------------------------------------------
# URL patterns
# ---------------------------------------------------------------------
urlpatterns = [
    path("admin/", admin.site.urls),
    path("health/", health, name="health"),

    # OpenAPI / Docs
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("api/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),

    # Auth
    path("api/auth/csrf/", CsrfView.as_view(), name="auth-csrf"),
    path("api/auth/login/", LoginView.as_view(), name="auth-login"),
    path("api/auth/logout/", LogoutView.as_view(), name="auth-logout"),
    path("api/auth/me/", MeView.as_view(), name="auth-me"),

    # Router-driven API
    path("api/", include(router.urls)),
]
