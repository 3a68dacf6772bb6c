"""Messaging router - FastAPI endpoints for chat"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import Account, get_current_account
from ...database import get_db
from ...rate_limiter import create_rate_limiter
from .schemas import (
    ChatRoomCreate,
    ChatRoomResponse,
    ContactResponse,
    MessageCreate,
    MessageResponse,
)
from .service import MessagingService

router = APIRouter(prefix="/chats", tags=["Messaging"])

# 60 messages per minute per client
message_rate_limit = create_rate_limiter(limit=60, window_seconds=60, key_prefix="messages")


def get_messaging_service(db: Session = Depends(get_db)) -> MessagingService:
    """Dependency injection for MessagingService"""
    return MessagingService(db)


@router.get("", response_model=list[ChatRoomResponse])
async def list_chats(
    account: Account = Depends(get_current_account),
    service: MessagingService = Depends(get_messaging_service),
):
    """The caller's chats with the counterpart and last message"""
    return service.list_rooms(account)


@router.post("", response_model=ChatRoomResponse)
async def open_chat(
    data: ChatRoomCreate,
    account: Account = Depends(get_current_account),
    service: MessagingService = Depends(get_messaging_service),
):
    """Open (or reuse) the chat with a physician or member"""
    return service.open_room(account, data.participant_id)


@router.get("/contacts", response_model=list[ContactResponse])
async def search_contacts(
    q: str = Query("", max_length=100),
    account: Account = Depends(get_current_account),
    service: MessagingService = Depends(get_messaging_service),
):
    return service.search_contacts(account, q)


@router.get("/{room_id}/messages", response_model=list[MessageResponse])
async def get_messages(
    room_id: int,
    limit: int = Query(100, ge=1, le=500),
    account: Account = Depends(get_current_account),
    service: MessagingService = Depends(get_messaging_service),
):
    """Latest messages, oldest first"""
    return service.get_messages(account, room_id, limit)


@router.post("/{room_id}/messages", response_model=MessageResponse, status_code=201)
async def send_message(
    room_id: int,
    data: MessageCreate,
    account: Account = Depends(get_current_account),
    service: MessagingService = Depends(get_messaging_service),
    _: None = Depends(message_rate_limit),
):
    return service.send_message(account, room_id, data)


__all__ = ["router"]
