"""
API routes for owner/tenant conversations.

New messages reach the browser over an SSE stream fed by the realtime
channel of the chat.
"""

import asyncio
import json

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sse_starlette.sse import EventSourceResponse

from babui.api.deps import get_context, get_user_session
from babui.api.middleware.auth import AuthenticatedUser, get_current_user
from babui.context import AppContext, Session
from babui.models.chat import Chat, Message

logger = structlog.get_logger()

router = APIRouter(prefix="/api/chats", tags=["chats"])

KEEPALIVE_SECONDS = 30.0


class CreateChatRequest(BaseModel):
    property_id: str
    owner_id: str


class SendMessageRequest(BaseModel):
    text: str


@router.get("")
async def list_chats(session: Session = Depends(get_user_session)) -> list[Chat]:
    return session.chats.fetch_chats()


@router.post("", status_code=201)
async def create_chat(request: CreateChatRequest, session: Session = Depends(get_user_session)) -> dict[str, str]:
    """Open the chat with a property's owner, or return the existing one."""
    chat_id = session.chats.create_chat(request.property_id, request.owner_id)
    return {"chat_id": chat_id}


@router.get("/{chat_id}/messages")
async def list_messages(chat_id: str, session: Session = Depends(get_user_session)) -> list[Message]:
    return session.chats.fetch_messages(chat_id)


@router.post("/{chat_id}/messages", status_code=201)
async def send_message(
    chat_id: str,
    request: SendMessageRequest,
    session: Session = Depends(get_user_session),
) -> Message:
    return session.chats.send_message(chat_id, request.text)


@router.post("/{chat_id}/read", status_code=204)
async def mark_read(chat_id: str, session: Session = Depends(get_user_session)) -> None:
    session.chats.get_chat(chat_id)
    session.chats.mark_messages_read(chat_id)


@router.get("/{chat_id}/stream")
async def stream_messages(
    chat_id: str,
    auth: AuthenticatedUser = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    """SSE stream of messages inserted into a chat."""
    # Owned by the generator: it outlives the request handler
    session = ctx.new_session(auth.user_id, auth.access_token)
    session.chats.get_chat(chat_id)
    queue: asyncio.Queue[Message] = asyncio.Queue()
    await session.chats.subscribe(chat_id, on_message=queue.put_nowait)

    async def event_generator():
        logger.info("Client connected to chat stream", chat_id=chat_id)
        try:
            while True:
                try:
                    message = await asyncio.wait_for(queue.get(), timeout=KEEPALIVE_SECONDS)
                    yield {"event": "message", "data": message.model_dump_json()}
                except asyncio.TimeoutError:
                    yield {"event": "keepalive", "data": json.dumps({})}
        finally:
            logger.info("Client disconnected from chat stream", chat_id=chat_id)
            await session.close()

    return EventSourceResponse(event_generator())
