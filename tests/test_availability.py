"""Tests for the pure slot availability functions"""

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

import pytest

from geekcare.domain.scheduling.availability import (
    TimeWindow,
    available_slots,
    bookable_slots,
    fits_within,
    gather_candidates,
    overlaps,
    split_window,
)

DAY = date(2030, 1, 7)  # a Monday, day_of_week == 1


def w(start: str, end: str) -> TimeWindow:
    return TimeWindow(
        datetime.combine(DAY, time.fromisoformat(start)),
        datetime.combine(DAY, time.fromisoformat(end)),
    )


@dataclass
class Slot:
    start_time: time
    end_time: time
    day_of_week: Optional[int] = None
    specific_date: Optional[date] = None
    is_available: Optional[bool] = True


def slot(start, end, **kwargs) -> Slot:
    return Slot(time.fromisoformat(start), time.fromisoformat(end), **kwargs)


# ============================================================================
# available_slots
# ============================================================================


def test_booked_slot_is_removed_and_order_kept():
    candidates = [w("09:00", "09:30"), w("09:30", "10:00"), w("10:00", "10:30")]
    booked = [w("09:30", "10:00")]

    assert available_slots(candidates, booked) == [w("09:00", "09:30"), w("10:00", "10:30")]


def test_no_bookings_returns_all_candidates():
    candidates = [w("10:00", "10:30"), w("09:00", "09:30")]

    assert available_slots(candidates, []) == candidates


def test_candidate_containing_booking_is_excluded():
    assert available_slots([w("09:00", "11:00")], [w("09:30", "10:00")]) == []


def test_back_to_back_windows_do_not_overlap():
    # candidate ends exactly when the booking starts, and vice versa
    assert available_slots([w("09:00", "09:30")], [w("09:30", "10:00")]) == [w("09:00", "09:30")]
    assert available_slots([w("10:00", "10:30")], [w("09:30", "10:00")]) == [w("10:00", "10:30")]


def test_partial_overlaps_are_excluded():
    booked = [w("09:15", "09:45")]

    assert available_slots([w("09:00", "09:30")], booked) == []
    assert available_slots([w("09:30", "10:00")], booked) == []
    assert available_slots([w("09:20", "09:40")], booked) == []


def test_idempotent():
    candidates = [w("09:00", "09:30"), w("09:30", "10:00"), w("10:00", "10:30")]
    booked = [w("09:45", "10:15")]

    first = available_slots(candidates, booked)
    assert available_slots(candidates, booked) == first
    assert available_slots(first, booked) == first


def test_incomplete_windows_are_dropped():
    candidates = [TimeWindow(None, w("09:00", "09:30").end), w("10:00", "10:30")]
    booked = [TimeWindow(w("10:00", "10:30").start, None)]

    assert available_slots(candidates, booked) == [w("10:00", "10:30")]


@pytest.mark.parametrize(
    "candidate,booked,expected",
    [
        (("09:00", "09:30"), ("09:00", "09:30"), True),
        (("09:00", "10:00"), ("09:30", "09:45"), True),
        (("09:30", "09:45"), ("09:00", "10:00"), True),
        (("09:00", "09:30"), ("09:30", "10:00"), False),
        (("08:00", "08:30"), ("09:00", "09:30"), False),
    ],
)
def test_overlaps(candidate, booked, expected):
    assert overlaps(w(*candidate), w(*booked)) is expected


def test_excluded_iff_overlapping_some_booking():
    candidates = [w(f"{h:02d}:{m:02d}", f"{h:02d}:{m + 15:02d}") for h in range(9, 12) for m in (0, 15, 30)]
    booked = [w("09:10", "09:40"), w("11:00", "11:15")]

    result = available_slots(candidates, booked)

    for candidate in candidates:
        blocked = any(overlaps(candidate, b) for b in booked)
        assert (candidate not in result) is blocked


# ============================================================================
# gather_candidates
# ============================================================================


def test_gather_combines_specific_and_recurring_slots():
    slots = [
        slot("14:00", "15:00", day_of_week=1),
        slot("09:00", "10:00", specific_date=DAY),
        slot("09:00", "10:00", day_of_week=2),  # other weekday
        slot("16:00", "17:00", specific_date=date(2030, 1, 8)),  # other date
    ]

    assert gather_candidates(DAY, slots) == [w("09:00", "10:00"), w("14:00", "15:00")]


def test_gather_deduplicates_by_times():
    slots = [
        slot("09:00", "10:00", day_of_week=1),
        slot("09:00", "10:00", specific_date=DAY),
    ]

    assert gather_candidates(DAY, slots) == [w("09:00", "10:00")]


def test_unavailable_date_slot_masks_recurring_slot():
    slots = [
        slot("09:00", "10:00", day_of_week=1),
        slot("09:00", "10:00", specific_date=DAY, is_available=False),
        slot("10:00", "11:00", day_of_week=1),
    ]

    assert gather_candidates(DAY, slots) == [w("10:00", "11:00")]


def test_sunday_is_day_zero():
    sunday = date(2030, 1, 6)
    slots = [slot("09:00", "10:00", day_of_week=0)]

    assert len(gather_candidates(sunday, slots)) == 1
    assert gather_candidates(DAY, slots) == []


# ============================================================================
# splitting and containment
# ============================================================================


def test_split_window_drops_short_remainder():
    parts = split_window(w("09:00", "10:10"), 30)

    assert parts == [w("09:00", "09:30"), w("09:30", "10:00")]


def test_split_window_rejects_non_positive_length():
    with pytest.raises(ValueError):
        split_window(w("09:00", "10:00"), 0)


def test_fits_within():
    candidates = [w("09:00", "12:00")]

    assert fits_within(w("11:30", "12:00"), candidates)
    assert not fits_within(w("11:45", "12:15"), candidates)


def test_bookable_slots_splits_then_subtracts_bookings():
    slots = [slot("09:00", "10:30", day_of_week=1)]
    booked = [w("09:30", "10:00")]

    result = bookable_slots(DAY, slots, booked, slot_minutes=30)

    assert result == [w("09:00", "09:30"), w("10:00", "10:30")]
