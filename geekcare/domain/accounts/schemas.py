"""Account domain schemas - Pydantic models for validation"""

from datetime import date
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import normalize_tags, validate_gender, validate_phone
from ..members.schemas import MemberProfile
from ..physicians.schemas import PhysicianProfile

ROLES = {"member", "physician"}


class RegisterRequest(BaseModel):
    """Profile details collected on the sign-up form"""

    role: Optional[str] = None  # falls back to the role stored with the identity
    full_name: Optional[str] = None
    mobile_number: Optional[str] = None
    residence: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[date] = None

    # Physician only
    bio: Optional[str] = None
    consultation_fee: Optional[float] = Field(None, ge=0)
    consultation_duration: Optional[int] = Field(None, ge=5, le=240)
    specialties: Optional[list[str]] = None
    languages: Optional[list[str]] = None

    @field_validator("role")
    @classmethod
    def validate_role(cls, v):
        if v is None:
            return v
        v = v.strip().lower()
        if v not in ROLES:
            raise ValueError("role must be 'member' or 'physician'")
        return v

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def empty_date_is_none(cls, v):
        if v == "":
            return None
        return v

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


class AccountResponse(BaseModel):
    role: str
    profile: Union[PhysicianProfile, MemberProfile]
