"""
Screen-level search state: the filters being edited and the visible results.

Edits never re-query; results change only on an explicit `search()`,
`refresh()` or `clear_filters()`.
"""

from typing import TYPE_CHECKING, Any, Optional

from babui.locations.resolver import LocationResolver
from babui.models.property import Property
from babui.search.filters import Filters, LocationLevel, apply_selection, toggle_amenity

if TYPE_CHECKING:
    from babui.stores.property_store import PropertyStore


class SearchSession:
    """Filter panel state bound to one property store."""

    def __init__(self, store: "PropertyStore", resolver: LocationResolver):
        self.store = store
        self.resolver = resolver
        self.filters = Filters()
        self.results: list[Property] = list(store.properties)

    def options(self, level: LocationLevel | str) -> list[Any]:
        """Selectable options for a level, given the current ancestors."""
        level = LocationLevel(level)
        if level is LocationLevel.DIVISION:
            return self.resolver.divisions_of()
        if level is LocationLevel.DISTRICT:
            return self.resolver.districts_of(self.filters.division)
        if level is LocationLevel.THANA:
            return self.resolver.upazilas_of(self.filters.district)
        return self.resolver.areas_of(self.filters.thana)

    def select_location(self, level: LocationLevel | str, value: Optional[str]) -> Filters:
        self.filters = apply_selection(self.filters, level, value)
        return self.filters

    def update(self, **fields: Any) -> Filters:
        """Set non-location fields (type, price range, counts, ...)."""
        for name in fields:
            if name in {lvl.value for lvl in LocationLevel}:
                raise ValueError(f"use select_location() for '{name}'")
        self.filters = Filters.model_validate({**self.filters.model_dump(), **fields})
        return self.filters

    def toggle_amenity(self, amenity: str, checked: bool) -> Filters:
        self.filters = toggle_amenity(self.filters, amenity, checked)
        return self.filters

    async def refresh(self) -> list[Property]:
        """Reload the full collection from the backend and re-apply the filters."""
        await self.store.fetch(Filters())
        return self.search()

    def search(self) -> list[Property]:
        self.results = self.store.search(self.filters)
        return self.results

    def clear_filters(self) -> list[Property]:
        self.filters = Filters()
        self.results = list(self.store.properties)
        return self.results
