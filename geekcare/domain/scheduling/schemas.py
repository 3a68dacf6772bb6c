"""Scheduling domain schemas - Pydantic models for validation"""

from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from ...shared.validators import validate_time_window


class SlotCreate(BaseModel):
    """Recurring slot (day_of_week) or date-specific slot (specific_date), never both"""

    day_of_week: Optional[int] = None  # 0=Sunday .. 6=Saturday
    specific_date: Optional[date] = None
    start_time: time
    end_time: time
    is_available: bool = True

    @field_validator("day_of_week")
    @classmethod
    def validate_day(cls, v):
        if v is not None and not 0 <= v <= 6:
            raise ValueError("day_of_week must be between 0 (Sunday) and 6 (Saturday)")
        return v

    @model_validator(mode="after")
    def validate_slot(self):
        if (self.day_of_week is None) == (self.specific_date is None):
            raise ValueError("Provide exactly one of day_of_week or specific_date")
        validate_time_window(self.start_time, self.end_time)
        return self


class SlotUpdate(BaseModel):
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    is_available: Optional[bool] = None


class SlotResponse(BaseModel):
    id: int
    physician_id: str
    day_of_week: Optional[int] = None
    specific_date: Optional[date] = None
    start_time: time
    end_time: time
    is_available: bool

    class Config:
        from_attributes = True


class WeeklyDay(BaseModel):
    day_of_week: int
    enabled: bool = True
    start_time: time
    end_time: time

    @field_validator("day_of_week")
    @classmethod
    def validate_day(cls, v):
        if not 0 <= v <= 6:
            raise ValueError("day_of_week must be between 0 (Sunday) and 6 (Saturday)")
        return v

    @model_validator(mode="after")
    def validate_times(self):
        if self.enabled:
            validate_time_window(self.start_time, self.end_time)
        return self


class WeeklyScheduleRequest(BaseModel):
    days: list[WeeklyDay]

    @field_validator("days")
    @classmethod
    def validate_days(cls, v):
        enabled = [d for d in v if d.enabled]
        if not enabled:
            raise ValueError("Please enable at least one day in your weekly schedule")
        return v


class OverrideWindow(BaseModel):
    start_time: time
    end_time: time
    is_available: bool = True

    @model_validator(mode="after")
    def validate_times(self):
        validate_time_window(self.start_time, self.end_time)
        return self


class OverrideRequest(BaseModel):
    windows: list[OverrideWindow]


class AvailableSlot(BaseModel):
    start_time: datetime
    end_time: datetime


class AvailabilityResponse(BaseModel):
    physician_id: str
    date: date
    slot_minutes: int
    slots: list[AvailableSlot]


class CalendarDay(BaseModel):
    date: date
    has_override: bool
    booked_count: int
    slots: list[AvailableSlot]


class CalendarResponse(BaseModel):
    month: str
    days: list[CalendarDay]
