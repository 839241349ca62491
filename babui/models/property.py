"""
Property (listing) models as seen by the client.

Raw rows from the `properties` table use different column names; see
`babui.db.mapping` for the translation.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class PropertyType(str, Enum):
    """Kinds of listing an owner can post."""

    APARTMENT = "apartment"
    ROOM = "room"
    OFFICE = "office"
    SHOP = "shop"
    PARKING = "parking"


class Coordinates(BaseModel):
    lat: float
    lng: float


class PropertyImage(BaseModel):
    id: str
    src: str
    alt: str = ""
    priority: bool = False


class PropertyLocation(BaseModel):
    division: str = ""
    district: str = ""
    thana: str = ""
    city: str = ""
    area: str = ""
    address: str = ""
    coordinates: Optional[Coordinates] = None


class Landlord(BaseModel):
    id: str
    name: str = "Property Owner"
    phone: str = ""
    email: str = ""
    verified: bool = False


class Property(BaseModel):
    """A listing as posted by an owner."""

    id: str
    title: str = ""
    description: str = ""
    price: float = 0
    currency: str = "BDT"
    type: str = PropertyType.APARTMENT.value
    bedrooms: int = 0
    bathrooms: int = 0
    area: float = 0  # square feet
    images: list[PropertyImage] = Field(default_factory=list)
    location: PropertyLocation = Field(default_factory=PropertyLocation)
    amenities: list[str] = Field(default_factory=list)
    landlord: Landlord
    available: bool = False
    availability: str = ""
    gender_preference: str = "any"
    furnishing: str = "unfurnished"
    priority: str = ""
    parking: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
