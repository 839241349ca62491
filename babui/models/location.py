"""
Administrative reference data for Bangladesh.

Division → District → Upazila (thana) → Area. Loaded from bundled static
files and never mutated at runtime.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Division(BaseModel):
    """Top-level administrative region."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    bn_name: Optional[str] = None


class District(BaseModel):
    """A district; belongs to exactly one division."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    division_id: str
    bn_name: Optional[str] = None


class Upazila(BaseModel):
    """An upazila/thana; belongs to exactly one district."""

    model_config = ConfigDict(frozen=True)

    upazila_id: str
    name: str
    district_id: str
    bn_name: Optional[str] = None


class AreaGroup(BaseModel):
    """Named sub-areas of one upazila, looked up by upazila_id."""

    model_config = ConfigDict(frozen=True)

    upazila_id: str
    areas: tuple[str, ...] = Field(default_factory=tuple)
