"""Scheduling service - Business logic for physician schedules and availability"""

import calendar
import logging
from datetime import date, datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Physician, ScheduleSlot
from ...shared.timeutils import clinic_now, clinic_today, day_of_week
from ...shared.validators import validate_time_window
from .availability import (
    TimeWindow,
    available_slots,
    bookable_slots,
    gather_candidates,
    split_windows,
)
from .repository import ScheduleRepository
from .schemas import (
    AvailabilityResponse,
    AvailableSlot,
    CalendarDay,
    CalendarResponse,
    OverrideRequest,
    SlotCreate,
    SlotUpdate,
    WeeklyScheduleRequest,
)

logger = logging.getLogger(__name__)


def _to_response_slots(windows: list[TimeWindow]) -> list[AvailableSlot]:
    return [AvailableSlot(start_time=w.start, end_time=w.end) for w in windows]


def _booked_windows(appointments) -> list[TimeWindow]:
    return [TimeWindow(a.start_time, a.end_time) for a in appointments]


class SchedulingService:
    """Service layer for schedule management and slot availability"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ScheduleRepository()

    # ------------------------------------------------------------------
    # Slot management (physician side)
    # ------------------------------------------------------------------

    def list_slots(self, physician: Physician) -> list[ScheduleSlot]:
        return self.repo.get_slots(self.db, physician.id)

    def create_slot(self, physician: Physician, data: SlotCreate) -> ScheduleSlot:
        logger.info(f"📅 Creating schedule slot for physician {physician.id}")
        return self.repo.create_slot(
            self.db,
            physician.id,
            day_of_week=data.day_of_week,
            specific_date=data.specific_date,
            start_time=data.start_time,
            end_time=data.end_time,
            is_available=data.is_available,
        )

    def get_slot(self, physician: Physician, slot_id: int) -> ScheduleSlot:
        slot = self.repo.get_slot(self.db, slot_id, physician.id)
        if not slot:
            raise HTTPException(status_code=404, detail="Schedule slot not found")
        return slot

    def update_slot(self, physician: Physician, slot_id: int, data: SlotUpdate) -> ScheduleSlot:
        slot = self.get_slot(physician, slot_id)

        start = data.start_time if data.start_time is not None else slot.start_time
        end = data.end_time if data.end_time is not None else slot.end_time
        try:
            validate_time_window(start, end)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        return self.repo.update_slot(
            self.db,
            slot,
            start_time=data.start_time,
            end_time=data.end_time,
            is_available=data.is_available,
        )

    def delete_slot(self, physician: Physician, slot_id: int) -> dict:
        slot = self.get_slot(physician, slot_id)
        self.repo.delete_slot(self.db, slot)
        logger.info(f"🗑️ Deleted schedule slot {slot_id} for physician {physician.id}")
        return {"message": "Schedule slot deleted"}

    def replace_weekly(self, physician: Physician, data: WeeklyScheduleRequest) -> list[ScheduleSlot]:
        """Replace all recurring slots with the enabled days of the submitted week"""
        rows = [
            {
                "day_of_week": day.day_of_week,
                "start_time": day.start_time,
                "end_time": day.end_time,
                "is_available": True,
            }
            for day in data.days
            if day.enabled
        ]
        slots = self.repo.replace_weekly(self.db, physician.id, rows)
        logger.info(f"✅ Weekly schedule saved for physician {physician.id}: {len(slots)} slots")
        return slots

    def set_override(
        self, physician: Physician, day: date, data: OverrideRequest
    ) -> list[ScheduleSlot]:
        """
        Replace the date-specific slots for one date.

        An empty window list marks the whole date unavailable by storing an
        unavailable copy of every recurring slot for that weekday.
        """
        if data.windows:
            rows = [
                {
                    "start_time": w.start_time,
                    "end_time": w.end_time,
                    "is_available": w.is_available,
                }
                for w in data.windows
            ]
        else:
            weekday = day_of_week(day)
            weekday_windows = {
                (s.start_time, s.end_time)
                for s in self.repo.get_slots_for_range(self.db, physician.id, day, day)
                if s.is_recurring and s.day_of_week == weekday
            }
            rows = [
                {"start_time": start, "end_time": end, "is_available": False}
                for start, end in sorted(weekday_windows)
            ]

        slots = self.repo.replace_override(self.db, physician.id, day, rows)
        logger.info(f"📅 Override for {day} saved for physician {physician.id}: {len(slots)} slots")
        return slots

    def delete_override(self, physician: Physician, day: date) -> dict:
        deleted = self.repo.delete_override(self.db, physician.id, day)
        return {"message": "Override removed", "deleted": deleted}

    # ------------------------------------------------------------------
    # Availability
    # ------------------------------------------------------------------

    def get_physician(self, physician_id: str) -> Physician:
        physician = self.repo.get_physician(self.db, physician_id)
        if not physician:
            raise HTTPException(status_code=404, detail="Physician not found")
        return physician

    def compute_available(
        self,
        physician: Physician,
        day: date,
        exclude_appointment_id: Optional[str] = None,
    ) -> list[TimeWindow]:
        """Consultation-length slots on `day` not taken by a scheduled appointment"""
        today = clinic_today()
        if day < today:
            return []

        slots = self.repo.get_slots_for_range(self.db, physician.id, day, day)
        day_start = datetime.combine(day, datetime.min.time())
        booked = self.repo.get_booked_appointments(
            self.db,
            physician.id,
            day_start,
            day_start + timedelta(days=1),
            exclude_appointment_id=exclude_appointment_id,
        )
        windows = bookable_slots(
            day, slots, _booked_windows(booked), slot_minutes=physician.consultation_duration
        )

        if day == today:
            now = clinic_now()
            windows = [w for w in windows if w.start >= now]
        return windows

    def get_availability(self, physician_id: str, day: date) -> AvailabilityResponse:
        physician = self.get_physician(physician_id)
        windows = self.compute_available(physician, day)
        logger.debug(f"📅 {len(windows)} open slots for physician {physician_id} on {day}")
        return AvailabilityResponse(
            physician_id=physician.id,
            date=day,
            slot_minutes=physician.consultation_duration,
            slots=_to_response_slots(windows),
        )

    def ensure_bookable(
        self,
        physician: Physician,
        start: datetime,
        end: datetime,
        exclude_appointment_id: Optional[str] = None,
    ) -> None:
        """
        Write-time check for a booking or reschedule.

        Locks the physician row so concurrent bookings for the same physician
        serialize, then re-runs the overlap test against committed bookings.
        Raises 409 unless the interval is one of the consultation slots the
        availability endpoint offers for that day, or when it is already taken.
        """
        self.repo.get_physician(self.db, physician.id, lock=True)

        if start < clinic_now():
            raise HTTPException(status_code=400, detail="Cannot book an appointment in the past")

        day = start.date()
        slots = self.repo.get_slots_for_range(self.db, physician.id, day, day)
        offered = split_windows(gather_candidates(day, slots), physician.consultation_duration)
        if TimeWindow(start, end) not in offered:
            raise HTTPException(
                status_code=409, detail="The physician is not available at the requested time"
            )

        booked = self.repo.get_booked_appointments(
            self.db, physician.id, start, end, exclude_appointment_id=exclude_appointment_id
        )
        if not available_slots([TimeWindow(start, end)], _booked_windows(booked)):
            logger.warning(f"⚠️ Slot conflict for physician {physician.id} at {start}")
            raise HTTPException(status_code=409, detail="This time slot is already booked")

    # ------------------------------------------------------------------
    # Monthly calendar
    # ------------------------------------------------------------------

    def month_calendar(self, physician: Physician, month: str) -> CalendarResponse:
        try:
            year, month_number = (int(part) for part in month.split("-"))
            first = date(year, month_number, 1)
        except ValueError as e:
            raise HTTPException(status_code=400, detail="month must be in YYYY-MM format") from e

        last = date(year, month_number, calendar.monthrange(year, month_number)[1])
        slots = self.repo.get_slots_for_range(self.db, physician.id, first, last)
        booked = self.repo.get_booked_appointments(
            self.db,
            physician.id,
            datetime.combine(first, datetime.min.time()),
            datetime.combine(last + timedelta(days=1), datetime.min.time()),
        )
        booked_windows = _booked_windows(booked)
        override_dates = {s.specific_date for s in slots if not s.is_recurring}

        days = []
        current = first
        while current <= last:
            windows = bookable_slots(
                current, slots, booked_windows, slot_minutes=physician.consultation_duration
            )
            days.append(
                CalendarDay(
                    date=current,
                    has_override=current in override_dates,
                    booked_count=sum(1 for a in booked if a.start_time.date() == current),
                    slots=_to_response_slots(windows),
                )
            )
            current += timedelta(days=1)

        return CalendarResponse(month=first.strftime("%Y-%m"), days=days)
