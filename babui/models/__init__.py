"""Domain models shared by the stores, the matcher and the API."""

from babui.models.chat import Chat, Message
from babui.models.location import AreaGroup, District, Division, Upazila
from babui.models.property import (
    Coordinates,
    Landlord,
    Property,
    PropertyImage,
    PropertyLocation,
    PropertyType,
)
from babui.models.user import SessionUser, UserProfile

__all__ = [
    "AreaGroup",
    "Chat",
    "Coordinates",
    "District",
    "Division",
    "Landlord",
    "Message",
    "Property",
    "PropertyImage",
    "PropertyLocation",
    "PropertyType",
    "SessionUser",
    "Upazila",
    "UserProfile",
]
