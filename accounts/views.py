"""
Auth endpoints and the `/api/users/` resource.

Authentication
--------------
- Login checks email + password, opens a Django session *and* returns a DRF token.
  Browser clients ride the session (CSRF enforced on unsafe methods); other
  clients send `Authorization: Token <key>`. Either way the authenticated user's
  email is what `authz` binds as the ambient principal.
- Logout ends the session and revokes the token (idempotent).

Users
-----
- Registration is an anonymous `POST /api/users/`, gated by `ENABLE_REGISTRATION`.
- Duplicate emails answer 409 (`email_exists`).
- Updating or deleting a user record is limited to that user or an ADMIN.
"""

from __future__ import annotations

from django.conf import settings
from django.contrib.auth import authenticate, get_user_model, login as dj_login, logout as dj_logout
from django.middleware.csrf import get_token
from django.utils.translation import gettext_lazy as _
from drf_spectacular.utils import OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import permissions, status, viewsets
from rest_framework.authtoken.models import Token
from rest_framework.response import Response
from rest_framework.views import APIView

from authz.rules import is_admin
from core.permissions import IsSelfOrAdmin

from .serializers import LoginResponseSerializer, LoginSerializer, UserPublicSerializer, UserSerializer

User = get_user_model()


def _public_payload(user) -> dict:
    return {"id": user.id, "email": user.email, "role": user.role}


class CsrfView(APIView):
    """
    GET only: prime a CSRF cookie and expose the token via header.
    Returns 204 with no body.
    """
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="auth_csrf",
        summary="Prime CSRF cookie",
        responses={204: OpenApiResponse(description="CSRF cookie set")},
    )
    def get(self, request, *args, **kwargs):
        token = get_token(request)
        resp = Response(status=status.HTTP_204_NO_CONTENT)
        resp["X-CSRFToken"] = token
        return resp


class LoginView(APIView):
    """Email/password login returning the user and an API token."""
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="auth_login",
        summary="Log in",
        request=LoginSerializer,
        responses={
            200: LoginResponseSerializer,
            400: OpenApiResponse(
                description='{"detail":"Invalid email or password.","code":"invalid_credentials"}'
            ),
        },
    )
    def post(self, request, *args, **kwargs):
        ser = LoginSerializer(data=request.data)
        if not ser.is_valid():
            return self._invalid()

        user = authenticate(
            request,
            email=ser.validated_data["email"],
            password=ser.validated_data["password"],
        )
        if user is None or not user.is_active:
            return self._invalid()

        dj_login(request, user)
        token, _created = Token.objects.get_or_create(user=user)
        payload = {**_public_payload(user), "token": token.key}
        return Response(payload, status=status.HTTP_200_OK)

    @staticmethod
    def _invalid() -> Response:
        return Response(
            {"detail": _("Invalid email or password."), "code": "invalid_credentials"},
            status=status.HTTP_400_BAD_REQUEST,
        )


class LogoutView(APIView):
    """Session logout plus token revocation (idempotent)."""
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="auth_logout",
        summary="Log out",
        responses={204: OpenApiResponse(description="Logged out")},
    )
    def post(self, request, *args, **kwargs):
        if request.user.is_authenticated:
            Token.objects.filter(user=request.user).delete()
        dj_logout(request)
        return Response(status=status.HTTP_204_NO_CONTENT)


class MeView(APIView):
    """Return the current authenticated user."""
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="auth_me",
        summary="Current user",
        responses={200: UserPublicSerializer, 401: OpenApiResponse(description="Not authenticated")},
    )
    def get(self, request, *args, **kwargs):
        return Response(_public_payload(request.user), status=status.HTTP_200_OK)


@extend_schema_view(
    list=extend_schema(tags=["Users"], description="List users."),
    retrieve=extend_schema(tags=["Users"], description="Retrieve a user."),
    create=extend_schema(
        tags=["Users"],
        description="Register a user. 409 when the email is taken.",
        responses={
            201: UserSerializer,
            403: OpenApiResponse(description="Registration disabled"),
            409: OpenApiResponse(description="Email already registered"),
        },
    ),
    update=extend_schema(tags=["Users"], description="Update a user (self or admin)."),
    partial_update=extend_schema(tags=["Users"], description="Partially update a user (self or admin)."),
    destroy=extend_schema(tags=["Users"], description="Delete a user (self or admin)."),
)
class UserViewSet(viewsets.ModelViewSet):
    """User CRUD; passwords are never returned."""
    lookup_value_regex = r"\d+"
    queryset = User.objects.all().order_by("email")
    serializer_class = UserSerializer
    search_fields = ["email", "first_name", "last_name"]
    ordering_fields = ["email", "date_joined"]
    filterset_fields = ["role"]

    def get_permissions(self):
        if self.action == "create":
            return [permissions.AllowAny()]
        if self.action in ("update", "partial_update", "destroy"):
            return [permissions.IsAuthenticated(), IsSelfOrAdmin()]
        return [permissions.IsAuthenticated()]

    def create(self, request, *args, **kwargs):
        if not getattr(settings, "ENABLE_REGISTRATION", False) and not is_admin(request.user):
            return Response(
                {"detail": _("Registration is disabled."), "code": "registration_disabled"},
                status=status.HTTP_403_FORBIDDEN,
            )
        if self._email_taken(request.data.get("email")):
            return self._conflict()
        return super().create(request, *args, **kwargs)

    def update(self, request, *args, **kwargs):
        instance = self.get_object()
        if self._email_taken(request.data.get("email"), exclude_pk=instance.pk):
            return self._conflict()
        return super().update(request, *args, **kwargs)

    @staticmethod
    def _email_taken(email, exclude_pk=None) -> bool:
        if not email:
            return False
        qs = User.objects.filter(email__iexact=email)
        if exclude_pk is not None:
            qs = qs.exclude(pk=exclude_pk)
        return qs.exists()

    @staticmethod
    def _conflict() -> Response:
        return Response(
            {"detail": _("A user with that email already exists."), "code": "email_exists"},
            status=status.HTTP_409_CONFLICT,
        )
