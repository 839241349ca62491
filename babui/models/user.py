from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SessionUser(BaseModel):
    """The signed-in user as held by the auth store."""

    id: str
    name: str = ""
    email: str = ""
    phone: str = ""
    favorites: list[str] = Field(default_factory=list)


class UserProfile(BaseModel):
    """Row of the `users` table."""

    id: str
    name_en: Optional[str] = None
    name_bn: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    gender: Optional[str] = None
    favorites: list[str] = Field(default_factory=list)
    myproperties: list[str] = Field(default_factory=list)
    profile_picture_url: Optional[str] = None
    location_en: Optional[str] = None
    location_bn: Optional[str] = None
    bio_en: Optional[str] = None
    bio_bn: Optional[str] = None
    created_at: Optional[datetime] = None
