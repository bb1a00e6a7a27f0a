"""Custom user model for Property Finder.

Identity
--------
- `email` is the login and the subject identifier carried by credentials; the
  authorization layer resolves principals back to rows through it.
- `role` is the only input to admin decisions. It is deliberately separate from
  Django's `is_staff`/`is_superuser`, which only gate the back-office admin site.
"""

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models


class Role(models.TextChoices):
    USER = "USER", "User"
    ADMIN = "ADMIN", "Admin"


class UserManager(BaseUserManager):
    """Manager for email-identified users (no username column)."""

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("The email must be set")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("role", Role.USER)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", Role.ADMIN)
        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")
        return self._create_user(email, password, **extra_fields)


class User(AbstractUser):
    """
    Project's custom user model.

    Invariants:
        - `email` is unique and required.
        - `role` is one of `Role`; there is no hierarchy beyond USER/ADMIN.
    """
    username = None
    email = models.EmailField("email address", unique=True)
    phone_number = models.CharField(max_length=32, blank=True)
    role = models.CharField(max_length=8, choices=Role.choices, default=Role.USER)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        ordering = ["email"]

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def display_name(self) -> str:
        full = self.get_full_name()
        return full or self.email

    def __str__(self) -> str:
        return self.email
