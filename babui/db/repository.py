"""
Repository layer for database operations.

Provides the table calls used by the stores: properties, users, chats and
messages. Every call is a single attempt; failures surface as BackendError.
"""

from datetime import datetime, timezone
from typing import Any

import httpx
import structlog
from postgrest.exceptions import APIError
from supabase import Client

from babui.db.client import get_supabase_client
from babui.exceptions import BackendError
from babui.search.filters import Filters

logger = structlog.get_logger()


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class BaseRepository:
    """Base repository with common operations."""

    table_name: str = ""

    def __init__(self, client: Client | None = None):
        self.client = client or get_supabase_client()

    def _table(self):
        return self.client.table(self.table_name)

    def _execute(self, query, action: str) -> list[dict]:
        """Run a query builder and return its rows."""
        try:
            result = query.execute()
        except (APIError, httpx.HTTPError) as e:
            logger.error("Backend call failed", table=self.table_name, action=action, error=str(e))
            raise BackendError(f"{action} on {self.table_name} failed: {e}") from e
        data = result.data if result is not None else None
        if data is None:
            return []
        return data if isinstance(data, list) else [data]


class PropertyRepository(BaseRepository):
    """Repository for the properties table."""

    table_name = "properties"

    def search(self, filters: Filters | None = None) -> list[dict]:
        """
        Select rows matching the backend-expressible part of the filters.

        Counts, amenities and enumerated preferences are matched client-side.
        """
        filters = filters or Filters()
        query = self._table().select("*")

        if filters.division:
            query = query.eq("address_division", filters.division)
        if filters.district:
            query = query.eq("address_district", filters.district)
        if filters.thana:
            query = query.eq("address_thana", filters.thana)
        if filters.sub_area:
            query = query.eq("address_area", filters.sub_area)
        elif filters.area_query:
            query = query.ilike("address_area", f"%{filters.area_query}%")
        if filters.priority:
            query = query.eq("priority", filters.priority)
        if filters.max_price is not None:
            query = query.lte("price", filters.max_price)
        if filters.min_price is not None:
            query = query.gte("price", filters.min_price)
        if filters.owner_id:
            query = query.eq("owner_id", filters.owner_id)

        return self._execute(query, "search")

    def get(self, property_id: str) -> dict | None:
        """Get a property row by ID."""
        rows = self._execute(self._table().select("*").eq("id", str(property_id)), "get")
        return rows[0] if rows else None

    def list_by_owner(self, owner_id: str) -> list[dict]:
        """List an owner's properties, newest first."""
        query = (
            self._table()
            .select("*")
            .eq("owner_id", str(owner_id))
            .order("created_at", desc=True)
        )
        return self._execute(query, "list_by_owner")

    def list_by_ids(self, property_ids: list[str]) -> list[dict]:
        if not property_ids:
            return []
        query = self._table().select("*").in_("id", [str(p) for p in property_ids])
        return self._execute(query, "list_by_ids")

    def create(self, row: dict) -> dict:
        """Insert a listing row."""
        rows = self._execute(self._table().insert(row), "create")
        if not rows:
            raise BackendError("create on properties returned no row")
        logger.info("Created property", property_id=rows[0].get("id"), type=row.get("property_type"))
        return rows[0]

    def update(self, property_id: str, **kwargs) -> dict | None:
        rows = self._execute(self._table().update(kwargs).eq("id", str(property_id)), "update")
        return rows[0] if rows else None

    def delete(self, property_id: str) -> None:
        self._execute(self._table().delete().eq("id", str(property_id)), "delete")
        logger.info("Deleted property", property_id=property_id)


class UserRepository(BaseRepository):
    """Repository for the users table (profiles, favorites, own listings)."""

    table_name = "users"

    def create(self, user_id: str, name: str, email: str, phone: str, gender: str) -> dict:
        data = {
            "id": user_id,
            "name_en": name,
            "email": email,
            "phone": phone,
            "gender": gender,
        }
        rows = self._execute(self._table().insert(data), "create")
        logger.info("Created user profile", user_id=user_id)
        return rows[0] if rows else data

    def get(self, user_id: str) -> dict | None:
        rows = self._execute(self._table().select("*").eq("id", str(user_id)), "get")
        return rows[0] if rows else None

    def update(self, user_id: str, **kwargs) -> dict | None:
        rows = self._execute(self._table().update(kwargs).eq("id", str(user_id)), "update")
        return rows[0] if rows else None

    def set_favorites(self, user_id: str, favorites: list[str]) -> None:
        self.update(user_id, favorites=favorites)

    def set_my_properties(self, user_id: str, property_ids: list[str]) -> None:
        self.update(user_id, myproperties=property_ids)


class ChatRepository(BaseRepository):
    """Repository for the chats table."""

    table_name = "chats"

    def list_for_user(self, user_id: str) -> list[dict]:
        """Chats where the user is owner or tenant, most recently updated first."""
        query = (
            self._table()
            .select("*")
            .or_(f"owner_id.eq.{user_id},tenant_id.eq.{user_id}")
            .order("updated_at", desc=True)
        )
        return self._execute(query, "list_for_user")

    def get(self, chat_id: str) -> dict | None:
        rows = self._execute(self._table().select("*").eq("id", str(chat_id)), "get")
        return rows[0] if rows else None

    def find(self, property_id: str, owner_id: str, tenant_id: str) -> dict | None:
        query = (
            self._table()
            .select("*")
            .eq("property_id", str(property_id))
            .eq("owner_id", str(owner_id))
            .eq("tenant_id", str(tenant_id))
            .limit(1)
        )
        rows = self._execute(query, "find")
        return rows[0] if rows else None

    def create(self, property_id: str, owner_id: str, tenant_id: str) -> dict:
        data = {
            "property_id": str(property_id),
            "owner_id": str(owner_id),
            "tenant_id": str(tenant_id),
            "last_message": "",
            "last_message_bn": "",
            "unread_count": 0,
        }
        rows = self._execute(self._table().insert(data), "create")
        if not rows:
            raise BackendError("create on chats returned no row")
        logger.info("Created chat", chat_id=rows[0].get("id"), property_id=property_id)
        return rows[0]

    def touch_last_message(self, chat_id: str, text: str) -> None:
        """Record the latest message on the parent chat."""
        now = utcnow_iso()
        self._execute(
            self._table()
            .update({
                "last_message": text,
                "last_message_bn": text,
                "last_message_time": now,
                "updated_at": now,
            })
            .eq("id", str(chat_id)),
            "touch_last_message",
        )

    def reset_unread(self, chat_id: str) -> None:
        self._execute(self._table().update({"unread_count": 0}).eq("id", str(chat_id)), "reset_unread")


class MessageRepository(BaseRepository):
    """Repository for the messages table."""

    table_name = "messages"

    def list_by_chat(self, chat_id: str) -> list[dict]:
        query = (
            self._table()
            .select("*")
            .eq("chat_id", str(chat_id))
            .order("created_at", desc=False)
        )
        return self._execute(query, "list_by_chat")

    def create(self, chat_id: str, sender_id: str, receiver_id: str, text: str) -> dict:
        data: dict[str, Any] = {
            "chat_id": str(chat_id),
            "sender_id": str(sender_id),
            "receiver_id": str(receiver_id),
            "text": text,
            "read": False,
        }
        rows = self._execute(self._table().insert(data), "create")
        if not rows:
            raise BackendError("create on messages returned no row")
        return rows[0]

    def mark_read(self, chat_id: str, receiver_id: str) -> None:
        self._execute(
            self._table()
            .update({"read": True})
            .eq("chat_id", str(chat_id))
            .eq("receiver_id", str(receiver_id))
            .eq("read", False),
            "mark_read",
        )
