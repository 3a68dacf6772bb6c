"""Support domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...utils.sanitization import MAX_TITLE_LENGTH, clean_text

TICKET_CATEGORIES = {"technical", "billing", "account", "appointment", "other"}
QUERY_STATUSES = {"pending", "answered"}


class TicketAttachment(BaseModel):
    key: str
    url: Optional[str] = None


class SupportTicketResponse(BaseModel):
    id: int
    user_id: str
    user_type: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    category: str
    subject: str
    message: str
    status: str
    attachments: list[TicketAttachment] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MedicalQueryCreate(BaseModel):
    subject: str = Field(..., max_length=MAX_TITLE_LENGTH)
    question: str = Field(...)

    @field_validator("subject", "question")
    @classmethod
    def not_blank(cls, v):
        v = clean_text(v)
        if not v:
            raise ValueError("This field cannot be empty")
        return v


class MedicalQueryAnswer(BaseModel):
    response: str = Field(..., max_length=10000)

    @field_validator("response")
    @classmethod
    def not_blank(cls, v):
        v = clean_text(v, max_length=10000)
        if not v:
            raise ValueError("Response cannot be empty")
        return v


class MedicalQueryResponse(BaseModel):
    id: int
    member_id: str
    physician_id: Optional[str] = None
    subject: str
    question: str
    response: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    answered_at: Optional[datetime] = None

    class Config:
        from_attributes = True
