"""Member repository - Database operations for members"""

from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Appointment, MedicalQuery, MedicalRecord, Member, SupportTicket


class MemberRepository:
    """Repository for member database operations"""

    @staticmethod
    def update_profile(db: Session, member: Member, **updates) -> Member:
        for key, value in updates.items():
            if value is not None and hasattr(member, key):
                setattr(member, key, value)
        db.commit()
        db.refresh(member)
        return member

    @staticmethod
    def get_upcoming_appointments(
        db: Session, member_id: str, after: datetime, limit: int = 5
    ) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(
                Appointment.member_id == member_id,
                Appointment.status == "scheduled",
                Appointment.start_time >= after,
            )
            .order_by(Appointment.start_time)
            .limit(limit)
            .all()
        )

    @staticmethod
    def count_upcoming_appointments(db: Session, member_id: str, after: datetime) -> int:
        return (
            db.query(func.count(Appointment.id))
            .filter(
                Appointment.member_id == member_id,
                Appointment.status == "scheduled",
                Appointment.start_time >= after,
            )
            .scalar()
            or 0
        )

    @staticmethod
    def count_records(db: Session, member_id: str) -> int:
        return (
            db.query(func.count(MedicalRecord.id))
            .filter(MedicalRecord.member_id == member_id)
            .scalar()
            or 0
        )

    @staticmethod
    def count_pending_queries(db: Session, member_id: str) -> int:
        return (
            db.query(func.count(MedicalQuery.id))
            .filter(MedicalQuery.member_id == member_id, MedicalQuery.status == "pending")
            .scalar()
            or 0
        )

    @staticmethod
    def count_open_tickets(db: Session, user_id: str) -> int:
        return (
            db.query(func.count(SupportTicket.id))
            .filter(
                SupportTicket.user_id == user_id,
                SupportTicket.status.in_(["open", "in_progress"]),
            )
            .scalar()
            or 0
        )
