"""Messaging repository - Database operations for chat rooms and messages"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import ChatMessage, ChatRoom, Member, Physician


class MessagingRepository:
    """Repository for chat database operations"""

    @staticmethod
    def list_rooms(db: Session, account_id: str, is_physician: bool) -> list[ChatRoom]:
        column = ChatRoom.physician_id if is_physician else ChatRoom.member_id
        return (
            db.query(ChatRoom)
            .options(joinedload(ChatRoom.member), joinedload(ChatRoom.physician))
            .filter(column == account_id)
            .order_by(ChatRoom.created_at.desc(), ChatRoom.id.desc())
            .all()
        )

    @staticmethod
    def get_room(db: Session, room_id: int) -> Optional[ChatRoom]:
        return db.query(ChatRoom).filter(ChatRoom.id == room_id).first()

    @staticmethod
    def find_room(db: Session, member_id: str, physician_id: str) -> Optional[ChatRoom]:
        return (
            db.query(ChatRoom)
            .filter(ChatRoom.member_id == member_id, ChatRoom.physician_id == physician_id)
            .first()
        )

    @staticmethod
    def create_room(db: Session, member_id: str, physician_id: str) -> ChatRoom:
        room = ChatRoom(member_id=member_id, physician_id=physician_id)
        db.add(room)
        db.commit()
        db.refresh(room)
        return room

    @staticmethod
    def get_last_message(db: Session, room_id: int) -> Optional[ChatMessage]:
        return (
            db.query(ChatMessage)
            .filter(ChatMessage.chat_room_id == room_id)
            .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
            .first()
        )

    @staticmethod
    def get_messages(db: Session, room_id: int, limit: int) -> list[ChatMessage]:
        """The newest `limit` messages, returned oldest first"""
        newest = (
            db.query(ChatMessage)
            .filter(ChatMessage.chat_room_id == room_id)
            .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
            .limit(limit)
            .all()
        )
        return list(reversed(newest))

    @staticmethod
    def add_message(db: Session, room_id: int, sender_id: str, **message_data) -> ChatMessage:
        message = ChatMessage(chat_room_id=room_id, sender_id=sender_id, **message_data)
        db.add(message)
        db.commit()
        db.refresh(message)
        return message

    @staticmethod
    def search_physicians(db: Session, query: str, limit: int = 10) -> list[Physician]:
        return (
            db.query(Physician)
            .filter(Physician.full_name.ilike(f"%{query}%"))
            .order_by(Physician.full_name)
            .limit(limit)
            .all()
        )

    @staticmethod
    def search_members(db: Session, query: str, limit: int = 10) -> list[Member]:
        return (
            db.query(Member)
            .filter(Member.full_name.ilike(f"%{query}%"))
            .order_by(Member.full_name)
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_physician(db: Session, physician_id: str) -> Optional[Physician]:
        return db.query(Physician).filter(Physician.id == physician_id).first()

    @staticmethod
    def get_member(db: Session, member_id: str) -> Optional[Member]:
        return db.query(Member).filter(Member.id == member_id).first()
