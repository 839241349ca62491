"""Property search: filter state, matching and the screen-level session."""

from babui.search.filters import Filters, LocationLevel, apply_selection, toggle_amenity
from babui.search.matcher import filter_properties, matches, properties_near
from babui.search.session import SearchSession

__all__ = [
    "Filters",
    "LocationLevel",
    "SearchSession",
    "apply_selection",
    "filter_properties",
    "matches",
    "properties_near",
    "toggle_amenity",
]
