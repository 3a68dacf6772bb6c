"""Account service - Business logic for profile registration"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...auth import Account, AuthIdentity
from ...config import DEFAULT_CONSULTATION_MINUTES
from ..members.schemas import MemberProfile
from ..physicians.schemas import PhysicianProfile
from .repository import AccountRepository
from .schemas import AccountResponse, RegisterRequest

logger = logging.getLogger(__name__)


def to_account_response(account: Account) -> AccountResponse:
    if account.is_physician:
        profile = PhysicianProfile.model_validate(account.profile)
    else:
        profile = MemberProfile.model_validate(account.profile)
    return AccountResponse(role=account.role, profile=profile)


class AccountService:
    """Service layer for account registration"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AccountRepository()

    def register(self, identity: AuthIdentity, data: RegisterRequest) -> AccountResponse:
        """Create the member or physician profile for a freshly signed-up identity"""
        role = data.role or (identity.role or "").lower()
        if role not in ("member", "physician"):
            raise HTTPException(status_code=400, detail="Please choose whether you are a member or a physician")

        full_name = (data.full_name or identity.full_name or "").strip()
        if not full_name:
            raise HTTPException(status_code=400, detail="Full name is required")

        if not identity.email:
            raise HTTPException(status_code=400, detail="Your account has no email address")

        if self.repo.uid_exists(self.db, identity.uid):
            raise HTTPException(status_code=409, detail="Profile already exists for this account")

        if self.repo.email_exists(self.db, identity.email):
            logger.warning(f"⚠️ Registration rejected, email already in use: {identity.email}")
            raise HTTPException(status_code=409, detail="An account with this email already exists")

        profile_data = {
            "id": identity.uid,
            "email": identity.email,
            "full_name": full_name,
            "mobile_number": data.mobile_number,
            "residence": data.residence,
            "gender": data.gender,
            "date_of_birth": data.date_of_birth,
        }

        try:
            if role == "physician":
                profile = self.repo.create_physician(
                    self.db,
                    specialties=data.specialties or [],
                    languages=data.languages or [],
                    bio=data.bio,
                    consultation_fee=data.consultation_fee or 0,
                    consultation_duration=data.consultation_duration or DEFAULT_CONSULTATION_MINUTES,
                    **profile_data,
                )
            else:
                profile = self.repo.create_member(self.db, **profile_data)
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"❌ Registration failed for {identity.uid}: {str(e)}")
            raise HTTPException(status_code=409, detail="An account with this email already exists") from e

        logger.info(f"✅ Registered {role} {identity.uid}")
        return to_account_response(Account(role=role, profile=profile))
