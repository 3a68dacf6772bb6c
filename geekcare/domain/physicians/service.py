"""Physician service - Business logic for physician search, profile and dashboard"""

import logging
from datetime import timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Physician
from ...shared.timeutils import clinic_now
from .repository import PhysicianRepository
from .schemas import (
    DashboardAppointment,
    DashboardQuery,
    PhysicianDashboard,
    PhysicianProfileUpdate,
)

logger = logging.getLogger(__name__)

DASHBOARD_WINDOW_DAYS = 7
DASHBOARD_LIMIT = 5


class PhysicianService:
    """Service layer for physician business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PhysicianRepository()

    def search(
        self,
        specialty: Optional[str] = None,
        gender: Optional[str] = None,
        language: Optional[str] = None,
        min_fee: Optional[float] = None,
        max_fee: Optional[float] = None,
        name: Optional[str] = None,
    ) -> list[Physician]:
        if min_fee is not None and max_fee is not None and min_fee > max_fee:
            raise HTTPException(status_code=400, detail="min_fee cannot be greater than max_fee")
        return self.repo.search(
            self.db,
            specialty=specialty,
            gender=gender,
            language=language,
            min_fee=min_fee,
            max_fee=max_fee,
            name=name,
        )

    def get_physician(self, physician_id: str) -> Physician:
        physician = self.repo.get_physician(self.db, physician_id)
        if not physician:
            raise HTTPException(status_code=404, detail="Physician not found")
        return physician

    def update_profile(self, physician: Physician, data: PhysicianProfileUpdate) -> Physician:
        logger.info(f"📝 Updating profile for physician {physician.id}")
        updates = data.model_dump(exclude_unset=True, exclude={"specialties", "languages"})
        try:
            return self.repo.update_profile(
                self.db,
                physician,
                specialties=data.specialties,
                languages=data.languages,
                **updates,
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update physician profile {physician.id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to update profile") from e

    def get_dashboard(self, physician: Physician) -> PhysicianDashboard:
        now = clinic_now()
        upcoming = self.repo.get_upcoming_appointments(
            self.db,
            physician.id,
            now,
            now + timedelta(days=DASHBOARD_WINDOW_DAYS),
            limit=DASHBOARD_LIMIT,
        )
        return PhysicianDashboard(
            upcoming_appointments=[DashboardAppointment.model_validate(a) for a in upcoming],
            pending_queries=[
                DashboardQuery.model_validate(q)
                for q in self.repo.get_pending_queries(self.db, limit=DASHBOARD_LIMIT)
            ],
            upcoming_count=self.repo.count_appointments(
                self.db, physician.id, "scheduled", after=now
            ),
            completed_count=self.repo.count_appointments(self.db, physician.id, "completed"),
            pending_query_count=self.repo.count_pending_queries(self.db),
            patient_count=self.repo.count_patients(self.db, physician.id),
        )
