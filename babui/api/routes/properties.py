"""
API routes for browsing and posting listings.

Browsing is open to guests. Posting needs a signed-in owner.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Query, Request

from babui.api.deps import get_context, get_session, get_user_session
from babui.context import AppContext, Session
from babui.db.mapping import row_to_property
from babui.exceptions import NotFoundError
from babui.listings import AMENITIES_BY_TYPE, ListingForm, fields_for
from babui.models.property import Property, PropertyType
from babui.search.filters import Filters
from babui.search.matcher import haversine_km
from babui.services.storage import listing_image_name

logger = structlog.get_logger()

router = APIRouter(prefix="/api/properties", tags=["properties"])


def _filters_from_query(request: Request) -> Filters:
    """Filters from query parameters; `amenities` may repeat or be comma separated."""
    params: dict[str, Any] = dict(request.query_params)
    amenities = request.query_params.getlist("amenities")
    if len(amenities) > 1:
        params["amenities"] = amenities
    return Filters.model_validate(params)


# ══════════════════════════════════════════════════════════
# Endpoints
# ══════════════════════════════════════════════════════════


@router.get("")
async def search_properties(
    request: Request,
    session: Session = Depends(get_session),
) -> list[Property]:
    """Listings matching the filters given as query parameters."""
    filters = _filters_from_query(request)
    results = await session.properties.fetch(filters)
    return results or []


@router.get("/nearby")
async def nearby_properties(
    lat: float,
    lng: float,
    radius_km: float | None = Query(default=None, gt=0),
    session: Session = Depends(get_session),
    ctx: AppContext = Depends(get_context),
) -> list[Property]:
    """Listings with map coordinates within `radius_km` of a point, nearest first."""
    await session.properties.fetch(Filters())
    nearby = session.properties.near(lat, lng, radius_km or ctx.settings.nearby_radius_km)
    return sorted(
        nearby,
        key=lambda p: haversine_km(lat, lng, p.location.coordinates.lat, p.location.coordinates.lng),
    )


@router.get("/schema/{property_type}")
async def listing_schema(property_type: PropertyType) -> dict[str, Any]:
    """Form fields and allowed amenities for a property type."""
    return {
        "type": property_type.value,
        "fields": [
            {
                "name": spec.name,
                "kind": spec.kind.value,
                "required": spec.required,
                "choices": list(spec.choices),
            }
            for spec in fields_for(property_type)
        ],
        "amenities": list(AMENITIES_BY_TYPE[property_type]),
    }


@router.get("/{property_id}")
async def get_property(
    property_id: str,
    ctx: AppContext = Depends(get_context),
) -> Property:
    row = ctx.property_repo.get(property_id)
    if not row:
        raise NotFoundError("Property not found")
    return row_to_property(row)


@router.post("", status_code=201)
async def create_listing(
    form: ListingForm,
    session: Session = Depends(get_user_session),
) -> Property:
    """Post a listing owned by the signed-in user. Images are already-uploaded URLs."""
    owner_id = session.auth.require_user().id
    return session.listings.publish(form, owner_id)


@router.post("/images", status_code=201)
async def upload_listing_image(
    request: Request,
    filename: str,
    session: Session = Depends(get_user_session),
    ctx: AppContext = Depends(get_context),
) -> dict[str, str]:
    """Upload one picture (raw request body) and return its public URL."""
    session.auth.require_user()
    data = await request.body()
    if not data:
        raise ValueError("Empty upload")

    url = session.storage.upload(
        ctx.settings.property_images_bucket,
        listing_image_name(filename),
        data,
        content_type=request.headers.get("content-type"),
    )
    return {"url": url}
