"""Listing form schema: which fields each property type takes, and how they are stored."""

from babui.listings.fields import (
    AMENITIES_BY_TYPE,
    FIELDS_BY_TYPE,
    FieldError,
    FieldKind,
    FieldSpec,
    ListingForm,
    build_listing_row,
    fields_for,
    validate_listing,
)
from babui.listings.service import ImageUpload, ListingService

__all__ = [
    "AMENITIES_BY_TYPE",
    "FIELDS_BY_TYPE",
    "FieldError",
    "FieldKind",
    "FieldSpec",
    "ImageUpload",
    "ListingForm",
    "ListingService",
    "build_listing_row",
    "fields_for",
    "validate_listing",
]
