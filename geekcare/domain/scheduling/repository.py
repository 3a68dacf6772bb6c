"""Scheduling repository - Database operations for schedule slots"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from ...models import Appointment, Physician, ScheduleSlot


class ScheduleRepository:
    """Repository for schedule slot database operations"""

    @staticmethod
    def get_physician(db: Session, physician_id: str, lock: bool = False) -> Optional[Physician]:
        """Get a physician, optionally locking the row until commit"""
        query = db.query(Physician).filter(Physician.id == physician_id)
        if lock:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def get_slots(db: Session, physician_id: str) -> list[ScheduleSlot]:
        return (
            db.query(ScheduleSlot)
            .filter(ScheduleSlot.physician_id == physician_id)
            .order_by(
                ScheduleSlot.specific_date.is_(None).desc(),
                ScheduleSlot.specific_date,
                ScheduleSlot.day_of_week,
                ScheduleSlot.start_time,
            )
            .all()
        )

    @staticmethod
    def get_slot(db: Session, slot_id: int, physician_id: str) -> Optional[ScheduleSlot]:
        return (
            db.query(ScheduleSlot)
            .filter(ScheduleSlot.id == slot_id, ScheduleSlot.physician_id == physician_id)
            .first()
        )

    @staticmethod
    def get_slots_for_range(
        db: Session, physician_id: str, start: date, end: date
    ) -> list[ScheduleSlot]:
        """All recurring slots plus the date-specific slots between start and end (inclusive)"""
        return (
            db.query(ScheduleSlot)
            .filter(
                ScheduleSlot.physician_id == physician_id,
                or_(
                    ScheduleSlot.specific_date.is_(None),
                    and_(ScheduleSlot.specific_date >= start, ScheduleSlot.specific_date <= end),
                ),
            )
            .all()
        )

    @staticmethod
    def create_slot(db: Session, physician_id: str, **slot_data) -> ScheduleSlot:
        slot = ScheduleSlot(physician_id=physician_id, **slot_data)
        db.add(slot)
        db.commit()
        db.refresh(slot)
        return slot

    @staticmethod
    def update_slot(db: Session, slot: ScheduleSlot, **updates) -> ScheduleSlot:
        for key, value in updates.items():
            if value is not None and hasattr(slot, key):
                setattr(slot, key, value)
        db.commit()
        db.refresh(slot)
        return slot

    @staticmethod
    def delete_slot(db: Session, slot: ScheduleSlot) -> None:
        db.delete(slot)
        db.commit()

    @staticmethod
    def replace_weekly(db: Session, physician_id: str, rows: list[dict]) -> list[ScheduleSlot]:
        """Delete every recurring slot and insert the new ones in one transaction"""
        db.query(ScheduleSlot).filter(
            ScheduleSlot.physician_id == physician_id,
            ScheduleSlot.specific_date.is_(None),
        ).delete(synchronize_session=False)

        slots = [ScheduleSlot(physician_id=physician_id, **row) for row in rows]
        db.add_all(slots)
        db.commit()
        for slot in slots:
            db.refresh(slot)
        return slots

    @staticmethod
    def replace_override(
        db: Session, physician_id: str, day: date, rows: list[dict]
    ) -> list[ScheduleSlot]:
        db.query(ScheduleSlot).filter(
            ScheduleSlot.physician_id == physician_id,
            ScheduleSlot.specific_date == day,
        ).delete(synchronize_session=False)

        slots = [ScheduleSlot(physician_id=physician_id, specific_date=day, **row) for row in rows]
        db.add_all(slots)
        db.commit()
        for slot in slots:
            db.refresh(slot)
        return slots

    @staticmethod
    def delete_override(db: Session, physician_id: str, day: date) -> int:
        deleted = (
            db.query(ScheduleSlot)
            .filter(ScheduleSlot.physician_id == physician_id, ScheduleSlot.specific_date == day)
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted

    @staticmethod
    def get_booked_appointments(
        db: Session,
        physician_id: str,
        start: datetime,
        end: datetime,
        exclude_appointment_id: Optional[str] = None,
    ) -> list[Appointment]:
        """Scheduled appointments whose interval intersects [start, end)"""
        query = db.query(Appointment).filter(
            Appointment.physician_id == physician_id,
            Appointment.status == "scheduled",
            Appointment.start_time < end,
            Appointment.end_time > start,
        )
        if exclude_appointment_id:
            query = query.filter(Appointment.id != exclude_appointment_id)
        return query.order_by(Appointment.start_time).all()
