"""Tests for schedule management and the availability endpoint"""

from datetime import timedelta


def at(day, clock):
    return f"{day.isoformat()}T{clock}:00"


def slot_starts(response):
    return [s["start_time"] for s in response.json()["slots"]]


# ============================================================================
# AVAILABILITY
# ============================================================================


def test_availability_splits_weekly_window_into_consultations(client, seed, booking_day, member_headers):
    seed.physician()
    seed.member()
    seed.weekly_slot("doc-1", booking_day, "09:00", "10:30")

    response = client.get(
        f"/physicians/doc-1/availability?date={booking_day.isoformat()}", headers=member_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["slot_minutes"] == 30
    assert slot_starts(response) == [
        at(booking_day, "09:00"),
        at(booking_day, "09:30"),
        at(booking_day, "10:00"),
    ]


def test_booked_slot_disappears_from_availability(client, seed, booking_day, member_headers):
    seed.physician()
    seed.member()
    seed.weekly_slot("doc-1", booking_day, "09:00", "10:30")

    booked = client.post(
        "/appointments",
        json={"physician_id": "doc-1", "start_time": at(booking_day, "09:30")},
        headers=member_headers,
    )
    assert booked.status_code == 201

    response = client.get(
        f"/physicians/doc-1/availability?date={booking_day.isoformat()}", headers=member_headers
    )
    assert slot_starts(response) == [at(booking_day, "09:00"), at(booking_day, "10:00")]


def test_past_date_has_no_availability(client, seed, booking_day, member_headers):
    seed.physician()
    seed.member()
    past = booking_day - timedelta(days=14)
    seed.weekly_slot("doc-1", past, "09:00", "12:00")

    response = client.get(f"/physicians/doc-1/availability?date={past.isoformat()}", headers=member_headers)

    assert response.status_code == 200
    assert response.json()["slots"] == []


def test_unknown_physician_availability_is_404(client, seed, booking_day, member_headers):
    seed.member()

    response = client.get(
        f"/physicians/nobody/availability?date={booking_day.isoformat()}", headers=member_headers
    )

    assert response.status_code == 404


def test_availability_requires_token(client, seed, booking_day):
    seed.physician()

    response = client.get(f"/physicians/doc-1/availability?date={booking_day.isoformat()}")

    assert response.status_code in (401, 403)


def test_unavailable_date_slot_blocks_weekly_slot(client, seed, booking_day, member_headers):
    seed.physician()
    seed.member()
    seed.weekly_slot("doc-1", booking_day, "09:00", "10:00")
    seed.weekly_slot("doc-1", booking_day, "14:00", "15:00")
    seed.date_slot("doc-1", booking_day, "09:00", "10:00", is_available=False)

    response = client.get(
        f"/physicians/doc-1/availability?date={booking_day.isoformat()}", headers=member_headers
    )

    assert slot_starts(response) == [at(booking_day, "14:00"), at(booking_day, "14:30")]


# ============================================================================
# SLOT MANAGEMENT
# ============================================================================


def test_physician_creates_and_lists_slots(client, seed, booking_day, doctor_headers):
    seed.physician()

    weekly = client.post(
        "/schedule/slots",
        json={"day_of_week": 1, "start_time": "09:00", "end_time": "12:00"},
        headers=doctor_headers,
    )
    dated = client.post(
        "/schedule/slots",
        json={"specific_date": booking_day.isoformat(), "start_time": "13:00", "end_time": "14:00"},
        headers=doctor_headers,
    )
    assert weekly.status_code == 201
    assert dated.status_code == 201
    assert dated.json()["day_of_week"] is None

    response = client.get("/schedule/slots", headers=doctor_headers)
    assert response.status_code == 200
    assert len(response.json()) == 2


def test_slot_needs_exactly_one_of_weekday_or_date(client, seed, booking_day, doctor_headers):
    seed.physician()

    both = client.post(
        "/schedule/slots",
        json={
            "day_of_week": 1,
            "specific_date": booking_day.isoformat(),
            "start_time": "09:00",
            "end_time": "10:00",
        },
        headers=doctor_headers,
    )
    neither = client.post(
        "/schedule/slots", json={"start_time": "09:00", "end_time": "10:00"}, headers=doctor_headers
    )

    assert both.status_code == 422
    assert neither.status_code == 422


def test_slot_start_must_precede_end(client, seed, doctor_headers):
    seed.physician()

    response = client.post(
        "/schedule/slots",
        json={"day_of_week": 2, "start_time": "10:00", "end_time": "09:00"},
        headers=doctor_headers,
    )

    assert response.status_code == 422


def test_update_slot_validates_merged_times(client, seed, booking_day, doctor_headers):
    seed.physician()
    slot_id = seed.weekly_slot("doc-1", booking_day, "09:00", "10:00")

    bad = client.patch(f"/schedule/slots/{slot_id}", json={"start_time": "11:00"}, headers=doctor_headers)
    good = client.patch(
        f"/schedule/slots/{slot_id}",
        json={"end_time": "11:00", "is_available": False},
        headers=doctor_headers,
    )

    assert bad.status_code == 400
    assert good.status_code == 200
    assert good.json()["end_time"] == "11:00:00"
    assert good.json()["is_available"] is False


def test_delete_slot_only_own(client, seed, booking_day, doctor_headers, headers_for):
    seed.physician()
    seed.physician(uid="doc-2", full_name="Dr. Two")
    slot_id = seed.weekly_slot("doc-1", booking_day)

    other = client.delete(f"/schedule/slots/{slot_id}", headers=headers_for("doc-2"))
    own = client.delete(f"/schedule/slots/{slot_id}", headers=doctor_headers)

    assert other.status_code == 404
    assert own.status_code == 200


def test_members_cannot_manage_slots(client, seed, member_headers):
    seed.member()

    response = client.get("/schedule/slots", headers=member_headers)

    assert response.status_code == 403


def test_weekly_schedule_replaces_recurring_slots(client, seed, booking_day, doctor_headers):
    seed.physician()
    seed.weekly_slot("doc-1", booking_day, "07:00", "08:00")
    seed.date_slot("doc-1", booking_day, "18:00", "19:00")

    response = client.put(
        "/schedule/weekly",
        json={
            "days": [
                {"day_of_week": 1, "start_time": "09:00", "end_time": "17:00"},
                {"day_of_week": 2, "start_time": "09:00", "end_time": "17:00"},
                {"day_of_week": 0, "enabled": False, "start_time": "09:00", "end_time": "17:00"},
            ]
        },
        headers=doctor_headers,
    )

    assert response.status_code == 200
    assert sorted(s["day_of_week"] for s in response.json()) == [1, 2]

    slots = client.get("/schedule/slots", headers=doctor_headers).json()
    assert len(slots) == 3  # two weekly + the untouched date-specific slot
    assert not any(s["start_time"] == "07:00:00" for s in slots)


def test_weekly_schedule_needs_an_enabled_day(client, seed, doctor_headers):
    seed.physician()

    response = client.put(
        "/schedule/weekly",
        json={"days": [{"day_of_week": 1, "enabled": False, "start_time": "09:00", "end_time": "17:00"}]},
        headers=doctor_headers,
    )

    assert response.status_code == 422


def test_day_off_override_and_removal(client, seed, booking_day, doctor_headers, member_headers):
    seed.physician()
    seed.member()
    seed.weekly_slot("doc-1", booking_day, "09:00", "10:00")
    url = f"/physicians/doc-1/availability?date={booking_day.isoformat()}"

    day_off = client.put(
        f"/schedule/overrides/{booking_day.isoformat()}", json={"windows": []}, headers=doctor_headers
    )
    assert day_off.status_code == 200
    assert [s["is_available"] for s in day_off.json()] == [False]
    assert client.get(url, headers=member_headers).json()["slots"] == []

    removed = client.delete(f"/schedule/overrides/{booking_day.isoformat()}", headers=doctor_headers)
    assert removed.status_code == 200
    assert removed.json()["deleted"] == 1
    assert len(client.get(url, headers=member_headers).json()["slots"]) == 2


def test_override_with_custom_hours(client, seed, booking_day, doctor_headers, member_headers):
    seed.physician()
    seed.member()
    seed.weekly_slot("doc-1", booking_day, "09:00", "10:00")

    client.put(
        f"/schedule/overrides/{booking_day.isoformat()}",
        json={"windows": [{"start_time": "15:00", "end_time": "16:00"}]},
        headers=doctor_headers,
    )

    response = client.get(
        f"/physicians/doc-1/availability?date={booking_day.isoformat()}", headers=member_headers
    )
    # date-specific hours are added to the weekly ones
    assert slot_starts(response) == [
        at(booking_day, "09:00"),
        at(booking_day, "09:30"),
        at(booking_day, "15:00"),
        at(booking_day, "15:30"),
    ]


# ============================================================================
# MONTHLY CALENDAR
# ============================================================================


def test_month_calendar(client, seed, booking_day, doctor_headers):
    seed.physician()
    seed.weekly_slot("doc-1", booking_day, "09:00", "10:00")
    month = booking_day.strftime("%Y-%m")

    response = client.get(f"/schedule/calendar?month={month}", headers=doctor_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["month"] == month
    day = next(d for d in body["days"] if d["date"] == booking_day.isoformat())
    assert len(day["slots"]) == 2
    assert day["has_override"] is False
    assert day["booked_count"] == 0


def test_month_calendar_rejects_bad_month(client, seed, doctor_headers):
    seed.physician()

    response = client.get("/schedule/calendar?month=2030-13", headers=doctor_headers)

    assert response.status_code == 400
