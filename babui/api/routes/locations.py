"""
API routes for the Bangladesh location hierarchy.

Division → district → upazila (thana) → area. All lookups are answered from
the bundled tables; unknown parents give empty lists.
"""

from fastapi import APIRouter, Depends

from babui.api.deps import get_context
from babui.context import AppContext
from babui.models.location import District, Division, Upazila

router = APIRouter(prefix="/api/locations", tags=["locations"])


@router.get("/divisions")
async def list_divisions(ctx: AppContext = Depends(get_context)) -> list[Division]:
    return ctx.resolver.divisions_of()


@router.get("/divisions/{division_id}/districts")
async def list_districts(division_id: str, ctx: AppContext = Depends(get_context)) -> list[District]:
    return ctx.resolver.districts_of(division_id)


@router.get("/districts/{district_id}/upazilas")
async def list_upazilas(district_id: str, ctx: AppContext = Depends(get_context)) -> list[Upazila]:
    return ctx.resolver.upazilas_of(district_id)


@router.get("/upazilas/{upazila_id}/areas")
async def list_areas(upazila_id: str, ctx: AppContext = Depends(get_context)) -> list[str]:
    return ctx.resolver.areas_of(upazila_id)
