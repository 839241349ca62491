"""
Cascading option resolver over the location reference tables.

Given a selection at one level, returns the valid options for the next
level down. Pure lookups over in-memory data: the only "failure" is an
empty result.
"""

from typing import Any, Optional

from babui.locations.data import LocationTables, load_bundled_tables
from babui.models.location import District, Division, Upazila


def _key(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class LocationResolver:
    """Division → District → Upazila → Area lookups."""

    def __init__(self, tables: LocationTables):
        self.tables = tables
        self._divisions = {d.id: d for d in tables.divisions}
        self._districts = {d.id: d for d in tables.districts}
        self._upazilas = {u.upazila_id: u for u in tables.upazilas}

    def divisions_of(self) -> list[Division]:
        """All divisions."""
        return list(self.tables.divisions)

    def districts_of(self, division_id: Any) -> list[District]:
        """Districts of a division; empty when the division is unset or unknown."""
        key = _key(division_id)
        if key is None:
            return []
        return [d for d in self.tables.districts if d.division_id == key]

    def upazilas_of(self, district_id: Any) -> list[Upazila]:
        """Upazilas/thanas of a district; empty when unset or unknown."""
        key = _key(district_id)
        if key is None:
            return []
        return [u for u in self.tables.upazilas if u.district_id == key]

    def areas_of(self, upazila_id: Any) -> list[str]:
        """Flattened area names of an upazila; empty when unset or unknown."""
        key = _key(upazila_id)
        if key is None:
            return []
        names: list[str] = []
        for group in self.tables.areas:
            if group.upazila_id == key:
                names.extend(group.areas)
        return names

    def division(self, division_id: Any) -> Optional[Division]:
        return self._divisions.get(_key(division_id))

    def district(self, district_id: Any) -> Optional[District]:
        return self._districts.get(_key(district_id))

    def upazila(self, upazila_id: Any) -> Optional[Upazila]:
        return self._upazilas.get(_key(upazila_id))


def get_location_resolver() -> LocationResolver:
    """Resolver over the bundled reference data."""
    return LocationResolver(load_bundled_tables())
