"""
Appointment slot availability.

Pure functions, no database access: the service layer fetches schedule slots
and booked appointments and hands them over as plain values.

All intervals are half-open, [start, end). Two appointments that touch
(one ends at 09:30, the next starts at 09:30) do not overlap.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Protocol

from ...shared.timeutils import day_of_week


@dataclass(frozen=True)
class TimeWindow:
    start: Optional[datetime]
    end: Optional[datetime]

    @property
    def is_complete(self) -> bool:
        return self.start is not None and self.end is not None

    @property
    def minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)


class SlotLike(Protocol):
    """Anything shaped like a physician_schedules row"""

    day_of_week: Optional[int]
    specific_date: Optional[date]
    start_time: object
    end_time: object
    is_available: Optional[bool]


def overlaps(candidate: TimeWindow, booked: TimeWindow) -> bool:
    """Three-way overlap test: start inside, end inside, or fully containing."""
    return (
        (booked.start <= candidate.start < booked.end)
        or (booked.start < candidate.end <= booked.end)
        or (candidate.start <= booked.start and candidate.end >= booked.end)
    )


def available_slots(
    candidates: Iterable[TimeWindow], booked: Iterable[TimeWindow]
) -> list[TimeWindow]:
    """
    Return the candidates that overlap none of the booked intervals.

    Candidate order is preserved. Windows missing a start or an end are
    dropped, on either side.
    """
    booked_intervals = [b for b in booked if b.is_complete]
    result = []
    for candidate in candidates:
        if not candidate.is_complete:
            continue
        if any(overlaps(candidate, b) for b in booked_intervals):
            continue
        result.append(candidate)
    return result


def gather_candidates(day: date, slots: Iterable[SlotLike]) -> list[TimeWindow]:
    """
    Candidate windows for one calendar date.

    Date-specific slots come first, then recurring slots for the weekday.
    Duplicates by (start, end) keep the first occurrence, and only then are
    unavailable slots removed, so a date-specific slot marked unavailable
    blocks the recurring slot with the same times on that date.
    """
    slots = list(slots)
    weekday = day_of_week(day)
    specific = [s for s in slots if s.specific_date == day]
    recurring = [s for s in slots if s.specific_date is None and s.day_of_week == weekday]

    seen = set()
    unique = []
    for slot in specific + recurring:
        times = (slot.start_time, slot.end_time)
        if times in seen:
            continue
        seen.add(times)
        unique.append(slot)

    windows = []
    for slot in unique:
        if slot.is_available is False:
            continue
        if not slot.start_time or not slot.end_time:
            continue
        windows.append(
            TimeWindow(datetime.combine(day, slot.start_time), datetime.combine(day, slot.end_time))
        )
    return sorted(windows, key=lambda w: (w.start, w.end))


def split_window(window: TimeWindow, minutes: int) -> list[TimeWindow]:
    """Consecutive slots of `minutes`; a shorter remainder at the end is dropped."""
    if minutes <= 0:
        raise ValueError("minutes must be positive")
    step = timedelta(minutes=minutes)
    result = []
    current = window.start
    while current + step <= window.end:
        result.append(TimeWindow(current, current + step))
        current += step
    return result


def split_windows(windows: Iterable[TimeWindow], minutes: int) -> list[TimeWindow]:
    seen = set()
    result = []
    for window in windows:
        for part in split_window(window, minutes):
            if (part.start, part.end) not in seen:
                seen.add((part.start, part.end))
                result.append(part)
    return sorted(result, key=lambda w: (w.start, w.end))


def fits_within(window: TimeWindow, candidates: Iterable[TimeWindow]) -> bool:
    """True when the window lies entirely inside one candidate"""
    return any(c.start <= window.start and window.end <= c.end for c in candidates)


def bookable_slots(
    day: date,
    slots: Iterable[SlotLike],
    booked: Iterable[TimeWindow],
    slot_minutes: Optional[int] = None,
) -> list[TimeWindow]:
    """Candidates for `day`, optionally split into consultation-length slots, minus bookings"""
    candidates = gather_candidates(day, slots)
    if slot_minutes:
        candidates = split_windows(candidates, slot_minutes)
    return available_slots(candidates, booked)
