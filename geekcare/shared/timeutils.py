"""Clinic-local time helpers.

Appointments are stored as naive wall-clock datetimes in CLINIC_TIMEZONE.
Clients may send ISO timestamps with an offset; those are converted first.
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from ..config import CLINIC_TIMEZONE


def clinic_zone() -> ZoneInfo:
    return ZoneInfo(CLINIC_TIMEZONE)


def to_clinic_naive(value: datetime) -> datetime:
    """Naive datetimes are taken as clinic-local already"""
    if value.tzinfo is None:
        return value.replace(microsecond=0)
    return value.astimezone(clinic_zone()).replace(tzinfo=None, microsecond=0)


def clinic_now() -> datetime:
    return datetime.now(clinic_zone()).replace(tzinfo=None, microsecond=0)


def clinic_today() -> date:
    return clinic_now().date()


def day_of_week(day: date) -> int:
    """0=Sunday .. 6=Saturday, the numbering used by schedule slots"""
    return (day.weekday() + 1) % 7
