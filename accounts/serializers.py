"""
Serializers for user records.

- `password` is write-only and always hashed through `set_password`.
- `role` is writable only when the caller is an ADMIN; for everyone else it is
  silently kept at its current value (USER on registration).
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from authz.rules import is_admin

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, required=False, trim_whitespace=False)

    class Meta:
        model = User
        fields = ["id", "email", "first_name", "last_name", "phone_number", "role", "password"]
        read_only_fields = ["id"]
        extra_kwargs = {
            # Duplicate emails answer 409 in the view, not 400 here.
            "email": {"validators": []},
        }

    def _caller_is_admin(self) -> bool:
        request = self.context.get("request")
        return is_admin(getattr(request, "user", None))

    def validate_password(self, value):
        validate_password(value)
        return value

    def validate(self, attrs):
        if "role" in attrs and not self._caller_is_admin():
            attrs.pop("role")
        if self.instance is None and not attrs.get("password"):
            raise serializers.ValidationError({"password": ["This field is required."]})
        return attrs

    def create(self, validated_data):
        password = validated_data.pop("password")
        return User.objects.create_user(password=password, **validated_data)

    def update(self, instance, validated_data):
        password = validated_data.pop("password", None)
        for field, value in validated_data.items():
            setattr(instance, field, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance


class UserPublicSerializer(serializers.Serializer):
    """Minimal public shape for the authenticated user."""
    id = serializers.IntegerField()
    email = serializers.EmailField()
    role = serializers.CharField()


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class LoginResponseSerializer(UserPublicSerializer):
    token = serializers.CharField()
