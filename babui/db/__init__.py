"""
Database layer for Babui.

Uses Supabase as the backend for:
- PostgreSQL database
- File storage
- Realtime subscriptions
"""

from babui.db.client import get_supabase_client, get_supabase_client_with_token, new_auth_client
from babui.db.repository import (
    ChatRepository,
    MessageRepository,
    PropertyRepository,
    UserRepository,
)

__all__ = [
    "get_supabase_client",
    "get_supabase_client_with_token",
    "new_auth_client",
    "ChatRepository",
    "MessageRepository",
    "PropertyRepository",
    "UserRepository",
]
