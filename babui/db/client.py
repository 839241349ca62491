"""
Supabase client configuration.
"""

from functools import lru_cache

import structlog
from supabase import AsyncClient, Client, ClientOptions, acreate_client, create_client

from babui.config import get_settings

logger = structlog.get_logger()


def _get_url_and_key() -> tuple[str, str]:
    """Get Supabase URL and key from settings (service key preferred)."""
    settings = get_settings()
    key = settings.supabase_service_key or settings.supabase_anon_key

    if not settings.supabase_url or not key:
        raise ValueError(
            "Supabase URL and key must be set. "
            "Set SUPABASE_URL and SUPABASE_SERVICE_KEY (or SUPABASE_ANON_KEY)"
        )

    return settings.supabase_url, key


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """Get a cached Supabase client instance."""
    url, key = _get_url_and_key()
    client = create_client(url, key)
    logger.info("Supabase client initialized")
    return client


def get_supabase_client_with_token(access_token: str) -> Client:
    """
    Get a Supabase client authenticated with the user's access token.

    This client respects RLS policies because auth.uid() will return the user's ID.
    """
    settings = get_settings()
    options = ClientOptions(
        headers={"Authorization": f"Bearer {access_token}"}
    )
    return create_client(settings.supabase_url, settings.supabase_anon_key, options=options)


def new_auth_client() -> Client:
    """
    Get a fresh anon-key client for sign-up, sign-in and password reset.

    A successful sign-in rewrites the client's Authorization header, so auth
    calls never go through the shared cached client.
    """
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise ValueError("Supabase URL and anon key must be set for auth calls")
    options = ClientOptions(auto_refresh_token=False, persist_session=False)
    return create_client(settings.supabase_url, settings.supabase_anon_key, options=options)


async def create_realtime_client() -> AsyncClient:
    """Async client used for realtime channel subscriptions."""
    url, key = _get_url_and_key()
    return await acreate_client(url, key)
