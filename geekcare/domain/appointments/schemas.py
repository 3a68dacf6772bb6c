"""Appointment domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...utils.sanitization import MAX_TITLE_LENGTH, clean_text

PAYMENT_METHODS = {"onsite", "online"}
PHYSICIAN_STATUSES = {"completed", "cancelled"}


class AppointmentDetailsIn(BaseModel):
    """Intake answers captured on the booking form"""

    patient_name: Optional[str] = None
    patient_age: Optional[int] = Field(None, ge=0, le=150)
    reason: Optional[str] = None
    symptoms: Optional[str] = None
    medical_history: Optional[str] = None

    @field_validator("patient_name")
    @classmethod
    def sanitize_name(cls, v):
        if v is None:
            return v
        return clean_text(v, max_length=MAX_TITLE_LENGTH)

    @field_validator("reason", "symptoms", "medical_history")
    @classmethod
    def sanitize_text(cls, v):
        if v is None:
            return v
        return clean_text(v)


class AppointmentCreate(BaseModel):
    physician_id: str
    start_time: datetime
    details: Optional[AppointmentDetailsIn] = None
    payment_method: str = "onsite"

    @field_validator("payment_method")
    @classmethod
    def validate_payment_method(cls, v):
        v = v.strip().lower()
        if v not in PAYMENT_METHODS:
            raise ValueError("payment_method must be 'onsite' or 'online'")
        return v


class RescheduleRequest(BaseModel):
    start_time: datetime


class StatusUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        v = v.strip().lower()
        if v not in PHYSICIAN_STATUSES:
            raise ValueError("status must be 'completed' or 'cancelled'")
        return v


class BatchStatusUpdate(StatusUpdate):
    appointment_ids: list[str] = Field(..., min_length=1, max_length=100)


class PaymentConfirmRequest(BaseModel):
    payment_id: str = Field(..., min_length=1, max_length=255)
    order_id: str = Field(..., min_length=1, max_length=255)
    signature: str = Field(..., min_length=1)


class AppointmentDetailResponse(BaseModel):
    patient_name: Optional[str] = None
    patient_age: Optional[int] = None
    reason: Optional[str] = None
    symptoms: Optional[str] = None
    medical_history: Optional[str] = None

    class Config:
        from_attributes = True


class PaymentResponse(BaseModel):
    id: int
    amount: float
    currency: str
    status: str
    payment_method: str
    payment_id: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AppointmentResponse(BaseModel):
    id: str
    physician_id: str
    member_id: str
    physician_name: Optional[str] = None
    member_name: Optional[str] = None
    start_time: datetime
    end_time: datetime
    status: str
    details: Optional[AppointmentDetailResponse] = None
    payment: Optional[PaymentResponse] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BatchStatusResponse(BaseModel):
    updated: list[str]
    skipped: list[str]
