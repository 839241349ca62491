from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Chat(BaseModel):
    """A conversation between a property owner and a prospective tenant."""

    id: str
    property_id: Optional[str] = None
    owner_id: str
    tenant_id: str
    last_message: str = ""
    last_message_time: Optional[datetime] = None
    unread_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Message(BaseModel):
    id: str
    chat_id: str
    sender_id: str
    receiver_id: Optional[str] = None
    text: str
    read: bool = False
    created_at: Optional[datetime] = None
