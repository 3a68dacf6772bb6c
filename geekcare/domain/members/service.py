"""Member service - Business logic for member profile and dashboard"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Member
from ...shared.timeutils import clinic_now
from .repository import MemberRepository
from .schemas import MemberAppointment, MemberDashboard, MemberProfileUpdate

logger = logging.getLogger(__name__)


class MemberService:
    """Service layer for member business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = MemberRepository()

    def update_profile(self, member: Member, data: MemberProfileUpdate) -> Member:
        logger.info(f"📝 Updating profile for member {member.id}")
        try:
            return self.repo.update_profile(self.db, member, **data.model_dump(exclude_unset=True))
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update member profile {member.id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to update profile") from e

    def get_dashboard(self, member: Member) -> MemberDashboard:
        now = clinic_now()
        upcoming = self.repo.get_upcoming_appointments(self.db, member.id, now)
        return MemberDashboard(
            upcoming_appointments=[MemberAppointment.model_validate(a) for a in upcoming],
            upcoming_count=self.repo.count_upcoming_appointments(self.db, member.id, now),
            records_count=self.repo.count_records(self.db, member.id),
            pending_query_count=self.repo.count_pending_queries(self.db, member.id),
            open_ticket_count=self.repo.count_open_tickets(self.db, member.id),
        )
