"""
Translation between raw `properties` rows and client-side Property models.

The persisted column names differ from the in-client names
(`property_details` → title, `pictures` → images, `address_*` → location, ...).
This mapping is shared by the mobile and web clients and must stay exact.
"""

import json
from datetime import datetime
from typing import Any, Optional

from babui.models.property import (
    Coordinates,
    Landlord,
    Property,
    PropertyImage,
    PropertyLocation,
    PropertyType,
)
from babui.models.chat import Chat, Message
from babui.models.user import UserProfile


DEFAULT_OWNER_NAME = "Property Owner"


def parse_coordinates(raw: Any) -> Optional[Coordinates]:
    """Decode `location_from_map` (JSON string or object) into coordinates."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return None
    if not isinstance(raw, dict):
        return None

    try:
        lat = float(raw["lat"])
        lng = float(raw["lng"])
    except (KeyError, TypeError, ValueError):
        return None
    return Coordinates(lat=lat, lng=lng)


def _parse_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _number(value: Any, default: float = 0) -> float:
    try:
        return float(value) if value is not None and value != "" else default
    except (TypeError, ValueError):
        return default


def row_to_property(row: dict) -> Property:
    """Map one `properties` row to a Property."""
    property_id = str(row.get("id") or "")
    pictures = row.get("pictures")
    amenities = row.get("amenities") or []

    images = []
    if isinstance(pictures, list):
        images = [
            PropertyImage(id=f"{property_id}-img{idx}", src=src, priority=idx == 0)
            for idx, src in enumerate(pictures)
            if isinstance(src, str)
        ]

    location = PropertyLocation(
        division=str(row.get("address_division") or ""),
        district=str(row.get("address_district") or ""),
        thana=str(row.get("address_thana") or ""),
        city=str(row.get("address_district") or ""),
        area=str(row.get("address_area") or ""),
        coordinates=parse_coordinates(row.get("location_from_map")),
    )

    landlord = Landlord(
        id=str(row.get("owner_id") or row.get("contact_user_id") or property_id),
        name=row.get("contact_name") or DEFAULT_OWNER_NAME,
        phone=row.get("contact_phone") or "",
        email=row.get("contact_email") or "",
        verified=False,
    )

    return Property(
        id=property_id,
        title=row.get("property_details") or "",
        description=row.get("location_details") or "",
        price=_number(row.get("price")),
        type=row.get("property_type") or row.get("type") or PropertyType.APARTMENT.value,
        bedrooms=int(_number(row.get("bedroom"))),
        bathrooms=int(_number(row.get("bathroom"))),
        area=_number(row.get("area_sqft")),
        images=images,
        location=location,
        amenities=list(amenities),
        landlord=landlord,
        available=row.get("availability") == "immediate",
        availability=row.get("availability") or "",
        gender_preference=row.get("gender_preference") or "any",
        furnishing=row.get("furnish") or "unfurnished",
        priority=row.get("priority") or "",
        parking="parking" in amenities,
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )


def rows_to_properties(rows: list[dict]) -> list[Property]:
    return [row_to_property(row) for row in rows]


def row_to_user(row: dict) -> UserProfile:
    """Map one `users` row; null array columns become empty lists."""
    data = dict(row)
    data["id"] = str(data.get("id"))
    data["favorites"] = [str(f) for f in data.get("favorites") or []]
    data["myproperties"] = [str(p) for p in data.get("myproperties") or []]
    return UserProfile.model_validate(data)


def row_to_chat(row: dict) -> Chat:
    return Chat(
        id=str(row.get("id")),
        property_id=str(row["property_id"]) if row.get("property_id") is not None else None,
        owner_id=str(row.get("owner_id")),
        tenant_id=str(row.get("tenant_id")),
        last_message=row.get("last_message") or "",
        last_message_time=_parse_datetime(row.get("last_message_time")),
        unread_count=int(row.get("unread_count") or 0),
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )


def row_to_message(row: dict) -> Message:
    return Message(
        id=str(row.get("id")),
        chat_id=str(row.get("chat_id")),
        sender_id=str(row.get("sender_id")),
        receiver_id=str(row["receiver_id"]) if row.get("receiver_id") is not None else None,
        text=row.get("text") or "",
        read=bool(row.get("read")),
        created_at=_parse_datetime(row.get("created_at")),
    )
