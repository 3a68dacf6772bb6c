"""Messaging service - Business logic for member/physician chat"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...auth import Account
from ...models import ChatMessage, ChatRoom
from .repository import MessagingRepository
from .schemas import ChatRoomResponse, ContactResponse, MessageCreate, MessageResponse

logger = logging.getLogger(__name__)

CONTACT_SEARCH_LIMIT = 10


class MessagingService:
    """Service layer for chat rooms and messages"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = MessagingRepository()

    def _room_response(self, account: Account, room: ChatRoom) -> ChatRoomResponse:
        counterpart = room.member if account.is_physician else room.physician
        last = self.repo.get_last_message(self.db, room.id)
        return ChatRoomResponse(
            id=room.id,
            member_id=room.member_id,
            physician_id=room.physician_id,
            counterpart_id=counterpart.id,
            counterpart_name=counterpart.full_name,
            counterpart_image_url=counterpart.profile_image_url,
            last_message=MessageResponse.model_validate(last) if last else None,
            created_at=room.created_at,
        )

    def list_rooms(self, account: Account) -> list[ChatRoomResponse]:
        rooms = self.repo.list_rooms(self.db, account.id, account.is_physician)
        return [self._room_response(account, room) for room in rooms]

    def open_room(self, account: Account, participant_id: str) -> ChatRoomResponse:
        """Return the member/physician room for this pair, creating it on first contact"""
        if account.is_physician:
            if not self.repo.get_member(self.db, participant_id):
                raise HTTPException(status_code=404, detail="Member not found")
            member_id, physician_id = participant_id, account.id
        else:
            if not self.repo.get_physician(self.db, participant_id):
                raise HTTPException(status_code=404, detail="Physician not found")
            member_id, physician_id = account.id, participant_id

        room = self.repo.find_room(self.db, member_id, physician_id)
        if room is None:
            try:
                room = self.repo.create_room(self.db, member_id, physician_id)
                logger.info(f"💬 Chat room {room.id} opened between {member_id} and {physician_id}")
            except IntegrityError:
                # Created concurrently by the other participant
                self.db.rollback()
                room = self.repo.find_room(self.db, member_id, physician_id)
                if room is None:
                    raise
        return self._room_response(account, room)

    def _get_room(self, account: Account, room_id: int) -> ChatRoom:
        room = self.repo.get_room(self.db, room_id)
        if not room:
            raise HTTPException(status_code=404, detail="Chat not found")
        if account.id not in (room.member_id, room.physician_id):
            logger.warning(f"🚫 {account.id} tried to access chat room {room_id}")
            raise HTTPException(status_code=403, detail="You are not a participant in this chat")
        return room

    def get_messages(self, account: Account, room_id: int, limit: int = 100) -> list[ChatMessage]:
        room = self._get_room(account, room_id)
        return self.repo.get_messages(self.db, room.id, limit)

    def send_message(self, account: Account, room_id: int, data: MessageCreate) -> ChatMessage:
        room = self._get_room(account, room_id)
        message = self.repo.add_message(
            self.db,
            room.id,
            account.id,
            content=data.content,
            voice_message_url=data.voice_message_url,
        )
        logger.debug(f"💬 Message {message.id} sent in room {room.id}")
        return message

    def search_contacts(self, account: Account, query: str) -> list[ContactResponse]:
        """Physicians see members, members see physicians"""
        query = (query or "").strip()
        if account.is_physician:
            people = self.repo.search_members(self.db, query, CONTACT_SEARCH_LIMIT)
            role = "member"
        else:
            people = self.repo.search_physicians(self.db, query, CONTACT_SEARCH_LIMIT)
            role = "physician"
        return [
            ContactResponse(
                id=p.id,
                full_name=p.full_name,
                profile_image_url=p.profile_image_url,
                role=role,
            )
            for p in people
        ]
