"""
Search filter state.

A Filters value is a flat set of optional criteria. Absence (None, empty
string or empty list) means "no constraint". Location selections cascade:
changing an ancestor clears every descendant in the same step, via
`apply_selection`.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

ANY = "any"


class LocationLevel(str, Enum):
    """Selector levels of the location hierarchy, top to bottom."""

    DIVISION = "division"
    DISTRICT = "district"
    THANA = "thana"
    SUB_AREA = "sub_area"


LEVEL_ORDER: tuple[LocationLevel, ...] = (
    LocationLevel.DIVISION,
    LocationLevel.DISTRICT,
    LocationLevel.THANA,
    LocationLevel.SUB_AREA,
)


class Filters(BaseModel):
    """User's current search criteria."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    # Location hierarchy
    division: Optional[str] = None
    district: Optional[str] = None
    thana: Optional[str] = None
    sub_area: Optional[str] = None
    area_query: Optional[str] = None

    # Listing attributes
    type: Optional[str] = None
    priority: Optional[str] = None
    max_price: Optional[float] = None
    min_price: Optional[float] = None
    min_area: Optional[float] = None
    max_area: Optional[float] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    gender_preference: Optional[str] = None
    furnishing: Optional[str] = None
    availability: Optional[str] = None
    parking: Optional[str] = None
    amenities: list[str] = Field(default_factory=list)
    owner_id: Optional[str] = None

    @field_validator(
        "division",
        "district",
        "thana",
        "sub_area",
        "area_query",
        "type",
        "priority",
        "gender_preference",
        "furnishing",
        "availability",
        "parking",
        "owner_id",
        mode="before",
    )
    @classmethod
    def _blank_text_is_unset(cls, value: Any) -> Any:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator(
        "max_price",
        "min_price",
        "min_area",
        "max_area",
        "bedrooms",
        "bathrooms",
        mode="before",
    )
    @classmethod
    def _blank_number_is_unset(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("amenities", mode="before")
    @classmethod
    def _amenities_list(cls, value: Any) -> Any:
        if value is None or value == "":
            return []
        if isinstance(value, str):
            value = value.split(",")
        return [a.strip() for a in value if isinstance(a, str) and a.strip()]

    def is_empty(self) -> bool:
        """True when no field imposes a constraint."""
        return not self.active()

    def active(self) -> dict[str, Any]:
        """The set fields only, keyed by field name."""
        return {
            name: value
            for name, value in self
            if value is not None and value != [] and value != ANY
        }


def apply_selection(filters: Filters, level: LocationLevel | str, value: Optional[str]) -> Filters:
    """
    Select a value at one location level and clear every level below it.

    Returns a new Filters; the input is not modified.
    """
    level = LocationLevel(level)
    index = LEVEL_ORDER.index(level)

    update: dict[str, Optional[str]] = {level.value: value}
    for child in LEVEL_ORDER[index + 1:]:
        update[child.value] = None

    return Filters.model_validate({**filters.model_dump(), **update})


def toggle_amenity(filters: Filters, amenity: str, checked: bool) -> Filters:
    """Add or remove one amenity from the requested set."""
    current = list(filters.amenities)
    if checked and amenity not in current:
        current.append(amenity)
    elif not checked:
        current = [a for a in current if a != amenity]
    return filters.model_copy(update={"amenities": current})
