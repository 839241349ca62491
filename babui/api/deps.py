"""Request-scoped dependencies shared by the routers."""

from typing import AsyncIterator, Optional

from fastapi import Depends, Request

from babui.api.middleware.auth import AuthenticatedUser, get_current_user, get_optional_user
from babui.context import AppContext, Session


def get_context(request: Request) -> AppContext:
    return request.app.state.context


async def get_session(
    ctx: AppContext = Depends(get_context),
    auth: Optional[AuthenticatedUser] = Depends(get_optional_user),
) -> AsyncIterator[Session]:
    """Stores for this request; guest when no token was sent."""
    session = ctx.new_session(auth.user_id, auth.access_token) if auth else ctx.new_session()
    try:
        yield session
    finally:
        await session.close()


async def get_user_session(
    ctx: AppContext = Depends(get_context),
    auth: AuthenticatedUser = Depends(get_current_user),
) -> AsyncIterator[Session]:
    """Stores for a signed-in user; 401 without a valid token."""
    session = ctx.new_session(auth.user_id, auth.access_token)
    try:
        yield session
    finally:
        await session.close()
