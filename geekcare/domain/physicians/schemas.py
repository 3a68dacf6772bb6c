"""Physician domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import normalize_tags, validate_gender, validate_phone


class PhysicianSummary(BaseModel):
    """Public view used in search results and the physician profile page"""

    id: str
    full_name: str
    gender: Optional[str] = None
    residence: Optional[str] = None
    profile_image_url: Optional[str] = None
    bio: Optional[str] = None
    consultation_fee: float
    consultation_duration: int
    specialties: list[str] = Field(default_factory=list, validation_alias="specialty_names")
    languages: list[str] = Field(default_factory=list, validation_alias="language_names")

    class Config:
        from_attributes = True
        populate_by_name = True


class PhysicianProfile(PhysicianSummary):
    """Own profile, including contact details"""

    email: str
    mobile_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    created_at: Optional[datetime] = None


class PhysicianProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    mobile_number: Optional[str] = None
    residence: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[date] = None
    profile_image_url: Optional[str] = None
    bio: Optional[str] = None
    consultation_fee: Optional[float] = Field(None, ge=0)
    consultation_duration: Optional[int] = Field(None, ge=5, le=240)
    specialties: Optional[list[str]] = None
    languages: Optional[list[str]] = None

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def empty_date_is_none(cls, v):
        # The profile form submits "" when the field is cleared
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

    @field_validator("specialties", "languages")
    @classmethod
    def clean_tags(cls, v):
        return normalize_tags(v)


class DashboardAppointment(BaseModel):
    id: str
    member_id: str
    member_name: Optional[str] = None
    start_time: datetime
    end_time: datetime
    status: str

    class Config:
        from_attributes = True


class DashboardQuery(BaseModel):
    id: int
    member_id: str
    subject: str
    question: str
    status: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PhysicianDashboard(BaseModel):
    upcoming_appointments: list[DashboardAppointment]
    pending_queries: list[DashboardQuery]
    upcoming_count: int
    completed_count: int
    pending_query_count: int
    patient_count: int
