from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from core.models import TimeStampedModel


class PropertyType(models.TextChoices):
    APARTMENT = "APARTMENT", "Apartment"
    HOUSE = "HOUSE", "House"
    VILLA = "VILLA", "Villa"
    TOWNHOUSE = "TOWNHOUSE", "Townhouse"
    STUDIO = "STUDIO", "Studio"
    PENTHOUSE = "PENTHOUSE", "Penthouse"
    COMMERCIAL = "COMMERCIAL", "Commercial"


class ListingType(models.TextChoices):
    FOR_SALE = "FOR_SALE", "For Sale"
    FOR_RENT = "FOR_RENT", "For Rent"


class Property(TimeStampedModel):
    # Owner may be absent (account removed); such listings are admin-managed only.
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="properties",
    )
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    location = models.CharField(max_length=200)
    bedrooms = models.PositiveSmallIntegerField(null=True, blank=True)
    bathrooms = models.PositiveSmallIntegerField(null=True, blank=True)
    area = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    property_type = models.CharField(max_length=16, choices=PropertyType.choices)
    listing_type = models.CharField(max_length=16, choices=ListingType.choices)

    class Meta:
        verbose_name_plural = "properties"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["owner"], name="listings_property_owner_idx"),
            models.Index(fields=["property_type", "listing_type"], name="listings_prop_type_listing_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.title} • {self.location}"


class Review(TimeStampedModel):
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviews",
    )
    property = models.ForeignKey(
        Property,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="reviews",
    )
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )
    comment = models.TextField(blank=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["author", "property"],
                name="uniq_review_per_author_property",
            ),
        ]

    def __str__(self) -> str:
        return f"Review #{self.pk} • {self.rating}/5"


class Bookmark(TimeStampedModel):
    """A property saved by a user; at most one per (user, property)."""
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookmarks",
    )
    property = models.ForeignKey(
        Property,
        on_delete=models.CASCADE,
        related_name="bookmarks",
    )

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "property"],
                name="uniq_bookmark_per_user_property",
            ),
        ]

    def __str__(self) -> str:
        return f"Bookmark #{self.pk} • user {self.user_id} → property {self.property_id}"
