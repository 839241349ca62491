"""
Bangladesh location hierarchy.

Static reference tables (divisions, districts, upazilas, areas) and the
resolver that computes cascading selector options over them.
"""

from babui.locations.data import LocationTables, extract_table, load_bundled_tables, load_tables
from babui.locations.resolver import LocationResolver, get_location_resolver

__all__ = [
    "LocationResolver",
    "LocationTables",
    "extract_table",
    "get_location_resolver",
    "load_bundled_tables",
    "load_tables",
]
