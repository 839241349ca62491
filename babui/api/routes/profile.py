"""
API routes for the signed-in user's profile, favorites and own listings.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request

from babui.api.deps import get_context, get_user_session
from babui.context import AppContext, Session
from babui.db.mapping import rows_to_properties
from babui.exceptions import NotFoundError
from babui.models.property import Property
from babui.models.user import UserProfile

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("")
async def get_profile(session: Session = Depends(get_user_session)) -> UserProfile:
    profile = session.auth.fetch_profile()
    if profile is None:
        raise NotFoundError("Profile not found")
    return profile


@router.patch("")
async def update_profile(
    updates: dict[str, Any],
    session: Session = Depends(get_user_session),
) -> UserProfile:
    return session.auth.update_profile(**updates)


@router.put("/picture")
async def upload_profile_picture(
    request: Request,
    filename: str,
    session: Session = Depends(get_user_session),
) -> dict[str, str]:
    """Replace the avatar with the raw request body."""
    data = await request.body()
    if not data:
        raise HTTPException(status_code=400, detail="Empty upload")
    url = session.auth.upload_profile_picture(filename, data, request.headers.get("content-type"))
    return {"url": url}


# ══════════════════════════════════════════════════════════
# Favorites
# ══════════════════════════════════════════════════════════


@router.get("/favorites")
async def list_favorites(
    session: Session = Depends(get_user_session),
    ctx: AppContext = Depends(get_context),
) -> list[Property]:
    favorites = session.auth.load_favorites()
    return rows_to_properties(ctx.property_repo.list_by_ids(favorites))


@router.put("/favorites/{property_id}")
async def add_favorite(property_id: str, session: Session = Depends(get_user_session)) -> dict[str, Any]:
    session.auth.load_favorites()
    session.auth.add_favorite(property_id)
    return {"favorites": session.auth.user.favorites}


@router.delete("/favorites/{property_id}")
async def remove_favorite(property_id: str, session: Session = Depends(get_user_session)) -> dict[str, Any]:
    session.auth.load_favorites()
    session.auth.remove_favorite(property_id)
    return {"favorites": session.auth.user.favorites}


@router.get("/properties")
async def my_properties(session: Session = Depends(get_user_session)) -> list[Property]:
    """Listings owned by the signed-in user, newest first."""
    return await session.properties.fetch_my_properties(session.auth.require_user().id)
