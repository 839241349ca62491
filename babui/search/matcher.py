"""
Query executor: Filters → predicate over Property.

A property matches when every set filter field is satisfied. Filtering is
stable: matching properties keep their original relative order.
"""

import math
from typing import Callable, Iterable

from babui.models.property import Property
from babui.search.filters import Filters

EARTH_RADIUS_KM = 6371.0

Check = Callable[[Property, object], bool]


def _same(a: object, b: object) -> bool:
    return str(a).strip() == str(b).strip()


def _has_parking(prop: Property, wanted: object) -> bool:
    if wanted == "required":
        return prop.parking
    if wanted == "not-required":
        return not prop.parking
    return True


CHECKS: dict[str, Check] = {
    "division": lambda p, v: _same(p.location.division, v),
    "district": lambda p, v: _same(p.location.district, v),
    "thana": lambda p, v: _same(p.location.thana, v),
    "sub_area": lambda p, v: _same(p.location.area, v),
    "area_query": lambda p, v: str(v).lower() in p.location.area.lower(),
    "type": lambda p, v: p.type.lower() == str(v).lower(),
    "priority": lambda p, v: p.priority == v,
    "max_price": lambda p, v: p.price <= v,
    "min_price": lambda p, v: p.price >= v,
    "min_area": lambda p, v: p.area >= v,
    "max_area": lambda p, v: p.area <= v,
    # "N+" options: at least N
    "bedrooms": lambda p, v: p.bedrooms >= v,
    "bathrooms": lambda p, v: p.bathrooms >= v,
    "gender_preference": lambda p, v: p.gender_preference == v,
    "furnishing": lambda p, v: p.furnishing == v,
    "availability": lambda p, v: p.availability == v,
    "parking": _has_parking,
    "amenities": lambda p, v: set(v).issubset(p.amenities),
    "owner_id": lambda p, v: _same(p.landlord.id, v),
}


def matches(prop: Property, filters: Filters) -> bool:
    """True when the property satisfies every active filter field."""
    for name, value in filters.active().items():
        if not CHECKS[name](prop, value):
            return False
    return True


def filter_properties(properties: Iterable[Property], filters: Filters | None = None) -> list[Property]:
    """Stable filter of a property collection; empty filters return everything."""
    if filters is None or filters.is_empty():
        return list(properties)
    return [p for p in properties if matches(p, filters)]


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points in kilometers."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def properties_near(
    properties: Iterable[Property],
    lat: float,
    lng: float,
    radius_km: float = 5.0,
) -> list[Property]:
    """Properties with map coordinates within `radius_km` of a point."""
    nearby = []
    for prop in properties:
        coords = prop.location.coordinates
        if coords is None:
            continue
        if haversine_km(lat, lng, coords.lat, coords.lng) <= radius_km:
            nearby.append(prop)
    return nearby
