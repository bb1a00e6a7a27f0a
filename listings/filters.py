"""
django-filter FilterSets for listing search.

Query parameters for `/api/properties/` and `/api/properties/search/`:
- `location`: case-insensitive substring.
- `property_type`, `listing_type`: exact choice.
- `bedrooms`: minimum number of bedrooms.
- `min_price`, `max_price`: inclusive price bounds.
"""

import django_filters

from .models import ListingType, Property, PropertyType, Review


class PropertyFilter(django_filters.FilterSet):
    location = django_filters.CharFilter(field_name="location", lookup_expr="icontains")
    property_type = django_filters.ChoiceFilter(choices=PropertyType.choices)
    listing_type = django_filters.ChoiceFilter(choices=ListingType.choices)
    bedrooms = django_filters.NumberFilter(field_name="bedrooms", lookup_expr="gte")
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")
    owner = django_filters.NumberFilter(field_name="owner_id")

    class Meta:
        model = Property
        fields = ["location", "property_type", "listing_type", "bedrooms", "min_price", "max_price", "owner"]


class ReviewFilter(django_filters.FilterSet):
    property = django_filters.NumberFilter(field_name="property_id")
    author = django_filters.NumberFilter(field_name="author_id")
    min_rating = django_filters.NumberFilter(field_name="rating", lookup_expr="gte")

    class Meta:
        model = Review
        fields = ["property", "author", "min_rating"]
