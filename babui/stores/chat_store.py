"""
Chat store: the signed-in user's conversations, their messages and the
realtime channels that deliver new messages.

One channel is open per subscribed chat. Channels are removed explicitly on
`unsubscribe()` / `close()`; nothing is left attached after the owning view
goes away.
"""

from typing import Any, Callable, Optional

import structlog
from supabase import AsyncClient

from babui.db.mapping import row_to_chat, row_to_message
from babui.db.repository import ChatRepository, MessageRepository
from babui.exceptions import BackendError, NotFoundError
from babui.models.chat import Chat, Message
from babui.stores.auth_store import AuthStore

logger = structlog.get_logger()

MessageCallback = Callable[[Message], Any]


def _inserted_record(payload: Any) -> Optional[dict]:
    """Row carried by a postgres-changes INSERT payload."""
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    if isinstance(data, dict) and isinstance(data.get("record"), dict):
        return data["record"]
    for key in ("record", "new"):
        if isinstance(payload.get(key), dict):
            return payload[key]
    return None


class ChatStore:
    """Conversations of the current session user."""

    def __init__(
        self,
        auth: AuthStore,
        chats: ChatRepository,
        messages: MessageRepository,
        realtime: AsyncClient | None = None,
    ):
        self.auth = auth
        self.chats_repo = chats
        self.messages_repo = messages
        self.realtime = realtime
        self.chats: list[Chat] = []
        self.messages: dict[str, list[Message]] = {}
        self._channels: dict[str, Any] = {}

    @property
    def user_id(self) -> str:
        return self.auth.require_user().id

    def other_user_id(self, chat: Chat) -> str:
        """The participant who is not the current user."""
        return chat.tenant_id if chat.owner_id == self.user_id else chat.owner_id

    def get_chat(self, chat_id: str) -> Chat:
        """
        A chat the current user takes part in.

        Raises:
            NotFoundError: If the chat does not exist or belongs to others
        """
        chat = next((c for c in self.chats if c.id == str(chat_id)), None)
        if chat is None:
            row = self.chats_repo.get(chat_id)
            chat = row_to_chat(row) if row else None
        if chat is None or self.user_id not in (chat.owner_id, chat.tenant_id):
            raise NotFoundError(f"Chat {chat_id} not found")
        return chat

    # ──────────────────────────────────────────────
    # Chats and messages
    # ──────────────────────────────────────────────

    def fetch_chats(self) -> list[Chat]:
        rows = self.chats_repo.list_for_user(self.user_id)
        self.chats = [row_to_chat(r) for r in rows]
        return self.chats

    def fetch_messages(self, chat_id: str) -> list[Message]:
        """Messages of a chat, oldest first; incoming ones are marked read."""
        self.get_chat(chat_id)
        rows = self.messages_repo.list_by_chat(chat_id)
        messages = [row_to_message(r) for r in rows]
        self.messages[str(chat_id)] = messages
        self.mark_messages_read(chat_id)
        return messages

    def mark_messages_read(self, chat_id: str) -> None:
        user_id = self.user_id
        self.messages_repo.mark_read(chat_id, user_id)
        self.chats_repo.reset_unread(chat_id)
        self.messages[str(chat_id)] = [
            m.model_copy(update={"read": True}) if m.receiver_id == user_id else m
            for m in self.messages.get(str(chat_id), [])
        ]
        self.chats = [
            c.model_copy(update={"unread_count": 0}) if c.id == str(chat_id) else c
            for c in self.chats
        ]

    def send_message(self, chat_id: str, text: str) -> Message:
        """
        Post a message to a chat and record it as the chat's latest.

        Raises:
            ValueError: If the text is blank
            BackendError: If either write fails
        """
        text = (text or "").strip()
        if not text:
            raise ValueError("Message text is empty")

        chat = self.get_chat(chat_id)
        row = self.messages_repo.create(
            chat_id=chat.id,
            sender_id=self.user_id,
            receiver_id=self.other_user_id(chat),
            text=text,
        )
        self.chats_repo.touch_last_message(chat.id, text)

        message = row_to_message(row)
        self._append(message)
        logger.info("Sent message", chat_id=chat.id, message_id=message.id)
        return message

    def create_chat(self, property_id: str, owner_id: str) -> str:
        """Open (or reuse) the chat between the current user and a property's owner."""
        tenant_id = self.user_id
        if str(owner_id) == tenant_id:
            raise ValueError("Cannot start a chat with yourself")

        existing = self.chats_repo.find(property_id, owner_id, tenant_id)
        if existing:
            return str(existing["id"])

        row = self.chats_repo.create(property_id, owner_id, tenant_id)
        chat = row_to_chat(row)
        self.chats = [chat, *self.chats]
        return chat.id

    def _append(self, message: Message) -> bool:
        current = self.messages.setdefault(message.chat_id, [])
        if any(m.id == message.id for m in current):
            return False
        current.append(message)
        return True

    # ──────────────────────────────────────────────
    # Realtime
    # ──────────────────────────────────────────────

    async def subscribe(self, chat_id: str, on_message: MessageCallback | None = None):
        """Listen for new messages in a chat; one channel per chat."""
        chat_id = str(chat_id)
        if chat_id in self._channels:
            return self._channels[chat_id]
        if self.realtime is None:
            raise BackendError("Realtime client is not configured")

        def handle_insert(payload: Any) -> None:
            record = _inserted_record(payload)
            if record is None:
                return
            message = row_to_message(record)
            if self._append(message) and on_message is not None:
                on_message(message)

        channel = self.realtime.channel(f"messages:{chat_id}")
        channel.on_postgres_changes(
            "INSERT",
            handle_insert,
            table="messages",
            schema="public",
            filter=f"chat_id=eq.{chat_id}",
        )
        await channel.subscribe()
        self._channels[chat_id] = channel
        logger.info("Subscribed to chat", chat_id=chat_id)
        return channel

    async def unsubscribe(self, chat_id: str) -> None:
        channel = self._channels.pop(str(chat_id), None)
        if channel is None or self.realtime is None:
            return
        await self.realtime.remove_channel(channel)
        logger.info("Unsubscribed from chat", chat_id=chat_id)

    @property
    def subscribed_chats(self) -> list[str]:
        return list(self._channels)

    async def close(self) -> None:
        for chat_id in list(self._channels):
            await self.unsubscribe(chat_id)
