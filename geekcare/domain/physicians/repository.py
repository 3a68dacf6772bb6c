"""Physician repository - Database operations for physicians"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from ...models import (
    Appointment,
    MedicalQuery,
    Physician,
    PhysicianLanguage,
    PhysicianSpecialty,
)


class PhysicianRepository:
    """Repository for physician database operations"""

    @staticmethod
    def get_physician(db: Session, physician_id: str) -> Optional[Physician]:
        return (
            db.query(Physician)
            .options(selectinload(Physician.specialties), selectinload(Physician.languages))
            .filter(Physician.id == physician_id)
            .first()
        )

    @staticmethod
    def search(
        db: Session,
        specialty: Optional[str] = None,
        gender: Optional[str] = None,
        language: Optional[str] = None,
        min_fee: Optional[float] = None,
        max_fee: Optional[float] = None,
        name: Optional[str] = None,
    ) -> list[Physician]:
        query = db.query(Physician).options(
            selectinload(Physician.specialties), selectinload(Physician.languages)
        )

        if specialty:
            query = query.filter(
                Physician.specialties.any(
                    func.lower(PhysicianSpecialty.specialty) == specialty.strip().lower()
                )
            )
        if language:
            query = query.filter(
                Physician.languages.any(
                    func.lower(PhysicianLanguage.language) == language.strip().lower()
                )
            )
        if gender:
            query = query.filter(func.lower(Physician.gender) == gender.strip().lower())
        if min_fee is not None:
            query = query.filter(Physician.consultation_fee >= min_fee)
        if max_fee is not None:
            query = query.filter(Physician.consultation_fee <= max_fee)
        if name:
            query = query.filter(Physician.full_name.ilike(f"%{name.strip()}%"))

        return query.order_by(Physician.full_name).all()

    @staticmethod
    def update_profile(
        db: Session,
        physician: Physician,
        specialties: Optional[list[str]] = None,
        languages: Optional[list[str]] = None,
        **updates,
    ) -> Physician:
        """Update basic fields; specialty and language lists replace the existing rows"""
        for key, value in updates.items():
            if value is not None and hasattr(physician, key):
                setattr(physician, key, value)

        if specialties is not None:
            physician.specialties = [PhysicianSpecialty(specialty=s) for s in specialties]
        if languages is not None:
            physician.languages = [PhysicianLanguage(language=lang) for lang in languages]

        db.commit()
        db.refresh(physician)
        return physician

    # ------------------------------------------------------------------
    # Dashboard queries
    # ------------------------------------------------------------------

    @staticmethod
    def get_upcoming_appointments(
        db: Session, physician_id: str, start: datetime, end: datetime, limit: int = 5
    ) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(
                Appointment.physician_id == physician_id,
                Appointment.status == "scheduled",
                Appointment.start_time >= start,
                Appointment.start_time < end,
            )
            .order_by(Appointment.start_time)
            .limit(limit)
            .all()
        )

    @staticmethod
    def count_appointments(db: Session, physician_id: str, status: str, after: Optional[datetime] = None) -> int:
        query = db.query(func.count(Appointment.id)).filter(
            Appointment.physician_id == physician_id, Appointment.status == status
        )
        if after is not None:
            query = query.filter(Appointment.start_time >= after)
        return query.scalar() or 0

    @staticmethod
    def count_patients(db: Session, physician_id: str) -> int:
        return (
            db.query(func.count(func.distinct(Appointment.member_id)))
            .filter(Appointment.physician_id == physician_id)
            .scalar()
            or 0
        )

    @staticmethod
    def get_pending_queries(db: Session, limit: int = 5) -> list[MedicalQuery]:
        return (
            db.query(MedicalQuery)
            .filter(MedicalQuery.status == "pending")
            .order_by(MedicalQuery.created_at.desc(), MedicalQuery.id.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def count_pending_queries(db: Session) -> int:
        return (
            db.query(func.count(MedicalQuery.id)).filter(MedicalQuery.status == "pending").scalar()
            or 0
        )
