"""
Declarative listing schema.

Each property type maps to an ordered list of field descriptors. The same
table drives the form (which inputs to show, in what order), the validator
and the row written to the `properties` table.

Bedroom/bathroom counts are exact here; search treats them as "at least N".
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from babui.exceptions import ListingValidationError
from babui.models.property import Coordinates, PropertyType
from babui.utils.bangladesh import validate_bangladeshi_phone

MAX_IMAGES = 10


class FieldKind(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    INTEGER = "integer"
    CHOICE = "choice"
    PHONE = "phone"
    EMAIL = "email"
    LIST = "list"
    COORDINATES = "coordinates"


@dataclass(frozen=True)
class FieldSpec:
    """One input of the listing form and the column it is stored in."""

    name: str
    column: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = False
    choices: tuple[str, ...] = ()


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


GENDER_CHOICES = ("male", "female", "family", "any")
FURNISH_CHOICES = ("furnished", "semi-furnished", "unfurnished")
AVAILABILITY_CHOICES = ("immediate", "within-week", "within-month")
PRIORITY_CHOICES = ("family", "bachelor", "sublet")
NEGOTIABLE_CHOICES = ("yes", "no")
PARKING_CHOICES = ("car", "bike", "both")


# Shared inputs
DIVISION = FieldSpec("division", "address_division", required=True)
DISTRICT = FieldSpec("district", "address_district", required=True)
THANA = FieldSpec("thana", "address_thana")
AREA_NAME = FieldSpec("area_name", "address_area")
LOCATION = FieldSpec("location", "location_from_map", FieldKind.COORDINATES)
LOCATION_DETAILS = FieldSpec("location_details", "location_details")
PRICE = FieldSpec("price", "price", FieldKind.NUMBER, required=True)
PRICE_NEGOTIABLE = FieldSpec("price_negotiable", "price_negotiability", FieldKind.CHOICE, choices=NEGOTIABLE_CHOICES)
AVAILABILITY = FieldSpec("availability", "availability", FieldKind.CHOICE, choices=AVAILABILITY_CHOICES)
AMENITIES = FieldSpec("amenities", "amenities", FieldKind.LIST)
DETAILS = FieldSpec("description", "property_details")
IMAGES = FieldSpec("images", "pictures", FieldKind.LIST)
CONTACT_NAME = FieldSpec("contact_name", "contact_name", required=True)
CONTACT_PHONE = FieldSpec("contact_phone", "contact_phone", FieldKind.PHONE, required=True)
CONTACT_EMAIL = FieldSpec("contact_email", "contact_email", FieldKind.EMAIL)

# Type-specific inputs
FLOOR = FieldSpec("floor", "floor")
BEDROOMS = FieldSpec("bedrooms", "bedroom", FieldKind.INTEGER, required=True)
BATHROOMS = FieldSpec("bathrooms", "bathroom", FieldKind.INTEGER)
BALCONY = FieldSpec("balcony", "balcony", FieldKind.INTEGER)
ROOM_QUANTITY = FieldSpec("room_quantity", "room_quantity", FieldKind.INTEGER, required=True)
GENDER = FieldSpec("gender_preference", "gender_preference", FieldKind.CHOICE, choices=GENDER_CHOICES)
PRIORITY = FieldSpec("priority", "priority", FieldKind.CHOICE, choices=PRIORITY_CHOICES)
AREA_SQFT = FieldSpec("area", "area_sqft", FieldKind.NUMBER)
FURNISH = FieldSpec("furnishing", "furnish", FieldKind.CHOICE, choices=FURNISH_CHOICES)
PARKING_TYPE = FieldSpec("parking_type", "type", FieldKind.CHOICE, required=True, choices=PARKING_CHOICES)
QUANTITY = FieldSpec("quantity", "quantity", FieldKind.INTEGER)

HEAD = (DIVISION, DISTRICT, THANA, AREA_NAME, LOCATION, LOCATION_DETAILS, PRICE, PRICE_NEGOTIABLE)
TAIL = (AVAILABILITY, AMENITIES, DETAILS, IMAGES, CONTACT_NAME, CONTACT_PHONE, CONTACT_EMAIL)

FIELDS_BY_TYPE: dict[PropertyType, tuple[FieldSpec, ...]] = {
    PropertyType.APARTMENT: (
        *HEAD,
        FLOOR,
        BEDROOMS,
        BALCONY,
        FieldSpec("bathrooms", "bathroom", FieldKind.INTEGER, required=True),
        GENDER,
        PRIORITY,
        AREA_SQFT,
        FURNISH,
        *TAIL,
    ),
    PropertyType.ROOM: (
        *HEAD,
        FLOOR,
        ROOM_QUANTITY,
        GENDER,
        PRIORITY,
        AREA_SQFT,
        BATHROOMS,
        BALCONY,
        FURNISH,
        *TAIL,
    ),
    PropertyType.OFFICE: (
        *HEAD,
        FLOOR,
        ROOM_QUANTITY,
        AREA_SQFT,
        BATHROOMS,
        FURNISH,
        *TAIL,
    ),
    PropertyType.SHOP: (
        *HEAD,
        FLOOR,
        BATHROOMS,
        AREA_SQFT,
        FURNISH,
        *TAIL,
    ),
    PropertyType.PARKING: (
        *HEAD,
        PARKING_TYPE,
        QUANTITY,
        *TAIL,
    ),
}

_BUILDING_AMENITIES = ("ac", "wifi", "security", "cctv", "elevator", "generator", "gas", "parking")

AMENITIES_BY_TYPE: dict[PropertyType, tuple[str, ...]] = {
    PropertyType.APARTMENT: (*_BUILDING_AMENITIES, "gym"),
    PropertyType.ROOM: (*_BUILDING_AMENITIES, "gym"),
    PropertyType.OFFICE: (*_BUILDING_AMENITIES, "gym"),
    PropertyType.SHOP: _BUILDING_AMENITIES,
    PropertyType.PARKING: ("security", "cctv"),
}


class ListingForm(BaseModel):
    """Everything an owner can enter when posting a listing."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: PropertyType
    division: Optional[str] = None
    district: Optional[str] = None
    thana: Optional[str] = None
    area_name: Optional[str] = None
    location: Optional[Coordinates] = None
    location_details: Optional[str] = None
    price: Optional[float] = None
    price_negotiable: Optional[str] = None
    floor: Optional[str] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    balcony: Optional[int] = None
    room_quantity: Optional[int] = None
    gender_preference: Optional[str] = None
    priority: Optional[str] = None
    area: Optional[float] = None
    furnishing: Optional[str] = None
    parking_type: Optional[str] = None
    quantity: Optional[int] = None
    availability: Optional[str] = None
    amenities: list[str] = Field(default_factory=list)
    description: Optional[str] = None
    images: list[str] = Field(default_factory=list)
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None


def fields_for(property_type: PropertyType | str) -> tuple[FieldSpec, ...]:
    """Ordered inputs shown for a property type."""
    return FIELDS_BY_TYPE[PropertyType(property_type)]


def _is_blank(value: Any) -> bool:
    return value is None or value == "" or value == []


def _check_field(spec: FieldSpec, value: Any) -> Optional[str]:
    if _is_blank(value):
        return "is required" if spec.required else None

    if spec.kind in (FieldKind.NUMBER, FieldKind.INTEGER) and value < 0:
        return "must not be negative"
    if spec.kind is FieldKind.CHOICE and value not in spec.choices:
        return f"must be one of {', '.join(spec.choices)}"
    if spec.kind is FieldKind.PHONE and not validate_bangladeshi_phone(value):
        return "is not a valid Bangladeshi mobile number"
    if spec.kind is FieldKind.EMAIL and "@" not in value:
        return "is not a valid email address"
    return None


def validate_listing(form: ListingForm) -> list[FieldError]:
    """Check a form against its property type's field table."""
    errors = []
    for spec in fields_for(form.type):
        message = _check_field(spec, getattr(form, spec.name))
        if message:
            errors.append(FieldError(spec.name, message))

    if form.price is not None and form.price == 0:
        errors.append(FieldError("price", "must be greater than zero"))

    allowed = AMENITIES_BY_TYPE[form.type]
    unknown = [a for a in form.amenities if a not in allowed]
    if unknown:
        errors.append(FieldError("amenities", f"not offered for {form.type.value}: {', '.join(unknown)}"))

    if len(form.images) > MAX_IMAGES:
        errors.append(FieldError("images", f"at most {MAX_IMAGES} images"))

    return errors


def _column_value(spec: FieldSpec, value: Any) -> Any:
    if spec.kind is FieldKind.COORDINATES:
        return json.dumps(value.model_dump()) if value is not None else None
    return value


def build_listing_row(
    form: ListingForm,
    owner_id: str,
    image_urls: Optional[list[str]] = None,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """
    Row for the `properties` table.

    Only the columns of the type's fields are written. `image_urls`, when
    given, replace the form's images (uploaded files resolved to URLs).

    Raises:
        ListingValidationError: If the form does not validate
    """
    if image_urls is not None:
        form = form.model_copy(update={"images": list(image_urls)})

    errors = validate_listing(form)
    if errors:
        raise ListingValidationError(errors)

    timestamp = (now or datetime.now(timezone.utc)).isoformat()
    row: dict[str, Any] = {
        "property_type": form.type.value,
        "owner_id": owner_id,
        "created_at": timestamp,
        "updated_at": timestamp,
    }
    for spec in fields_for(form.type):
        row[spec.column] = _column_value(spec, getattr(form, spec.name))
    return row
