"""Member domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_gender, validate_phone


class MemberProfile(BaseModel):
    id: str
    email: str
    full_name: str
    mobile_number: Optional[str] = None
    residence: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[date] = None
    profile_image_url: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MemberProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    mobile_number: Optional[str] = None
    residence: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[date] = None
    profile_image_url: Optional[str] = None

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def empty_date_is_none(cls, v):
        if v == "":
            return None
        return v

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Full name cannot be empty")
        return v.strip() if v else v

    @field_validator("mobile_number")
    @classmethod
    def validate_mobile(cls, v):
        return validate_phone(v)

    @field_validator("gender")
    @classmethod
    def validate_gender_field(cls, v):
        return validate_gender(v)


class MemberAppointment(BaseModel):
    id: str
    physician_id: str
    physician_name: Optional[str] = None
    start_time: datetime
    end_time: datetime
    status: str

    class Config:
        from_attributes = True


class MemberDashboard(BaseModel):
    upcoming_appointments: list[MemberAppointment]
    upcoming_count: int
    records_count: int
    pending_query_count: int
    open_ticket_count: int
