"""
API routes for place search, reverse geocoding and directions.
"""

from fastapi import APIRouter, Depends, Query

from babui.api.deps import get_context
from babui.context import AppContext
from babui.services.geocoding import Place, Route, TravelMode

router = APIRouter(prefix="/api/geo", tags=["geo"])


@router.get("/search")
async def search_places(
    q: str,
    limit: int = Query(default=8, ge=1, le=20),
    ctx: AppContext = Depends(get_context),
) -> list[Place]:
    return await ctx.geocoder.search(q, limit=limit)


@router.get("/reverse")
async def reverse_geocode(lat: float, lng: float, ctx: AppContext = Depends(get_context)) -> dict:
    return {"display_name": await ctx.geocoder.reverse(lat, lng)}


@router.get("/route")
async def route(
    from_lat: float,
    from_lng: float,
    to_lat: float,
    to_lng: float,
    mode: TravelMode = "car",
    ctx: AppContext = Depends(get_context),
) -> Route:
    return await ctx.geocoder.route((from_lat, from_lng), (to_lat, to_lng), mode)
