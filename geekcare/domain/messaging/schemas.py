"""Messaging domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...utils.sanitization import clean_text


class ChatRoomCreate(BaseModel):
    participant_id: str = Field(..., min_length=1)


class MessageCreate(BaseModel):
    """A text message or a voice message, never both"""

    content: Optional[str] = None
    voice_message_url: Optional[str] = None

    @field_validator("content")
    @classmethod
    def sanitize_content(cls, v):
        if v is None or not v.strip():
            return None
        return clean_text(v)

    @field_validator("voice_message_url")
    @classmethod
    def validate_voice_url(cls, v):
        if v is None or not v.strip():
            return None
        v = v.strip()
        if not v.startswith(("https://", "http://")):
            raise ValueError("voice_message_url must be an http(s) URL")
        return v

    @model_validator(mode="after")
    def exactly_one(self):
        if (self.content is None) == (self.voice_message_url is None):
            raise ValueError("Provide either content or voice_message_url")
        return self


class MessageResponse(BaseModel):
    id: int
    chat_room_id: int
    sender_id: str
    content: Optional[str] = None
    voice_message_url: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ChatRoomResponse(BaseModel):
    id: int
    member_id: str
    physician_id: str
    counterpart_id: str
    counterpart_name: Optional[str] = None
    counterpart_image_url: Optional[str] = None
    last_message: Optional[MessageResponse] = None
    created_at: Optional[datetime] = None


class ContactResponse(BaseModel):
    id: str
    full_name: str
    profile_image_url: Optional[str] = None
    role: str
