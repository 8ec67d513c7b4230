"""Tests for the Slot Generator."""

from datetime import date, datetime, time, timedelta

from clinic_booking.services.slots import SettingsSnapshot, generate_slots, list_available_dates

from conftest import (
    MONDAY,
    NOW,
    SUNDAY,
    add_appointment,
    add_capacity,
    add_exception,
    add_service,
    add_staff,
    seed_week,
)

CONFIG = SettingsSnapshot()
NO_CUTOFF = SettingsSnapshot(cutoff_days=0, cutoff_hours=0)


def at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime.combine(day, time(hour, minute))


def starts(result) -> list[str]:
    return [slot.display_start for slot in result.slots]


class TestGenerateSlots:
    """Scenarios and properties of generate_slots."""

    def test_two_periods_exclude_lunch(self, db, repo):
        """Scenario A: 09:00-11:30 and 13:00-17:30, all available."""
        seed_week(db)
        service = add_service(db)

        result = generate_slots(repo, MONDAY, service.id, config=CONFIG, now=NOW)

        assert result.error is None
        expected = [f"{h:02d}:{m:02d}" for h in range(9, 12) for m in (0, 30)]
        expected += [f"{h:02d}:{m:02d}" for h in range(13, 18) for m in (0, 30)]
        assert starts(result) == expected
        assert "12:00" not in starts(result)
        assert all(slot.available for slot in result.slots)

    def test_booked_slot_unavailable(self, db, repo):
        """Scenario B: an unstaffed booking at 10:00 fills capacity 1."""
        seed_week(db)
        service = add_service(db)
        add_appointment(db, service, at(MONDAY, 10), at(MONDAY, 10, 30))

        result = generate_slots(repo, MONDAY, service.id, config=CONFIG, now=NOW)

        by_start = {slot.display_start: slot for slot in result.slots}
        assert by_start["10:00"].available is False
        assert by_start["10:00"].booking_count == 1
        assert [s for s in result.slots if not s.available] == [by_start["10:00"]]

    def test_closed_exception_returns_reason(self, db, repo):
        """Scenario C: closed exception yields its reason and no slots."""
        seed_week(db)
        service = add_service(db)
        add_exception(db, "closed", MONDAY, reason="New Year")

        result = generate_slots(repo, MONDAY, service.id, config=CONFIG, now=NOW)

        assert result.slots == []
        assert result.error == "New Year"
        dates = [d.date for d in list_available_dates(repo, config=CONFIG, now=NOW)]
        assert MONDAY not in dates

    def test_special_open_sunday(self, db, repo):
        """Scenario D: special_open opens a closed Sunday 10:00-13:00."""
        seed_week(db)
        service = add_service(db)
        add_exception(db, "special_open", SUNDAY, morning_open=time(10, 0), morning_close=time(13, 0))

        result = generate_slots(repo, SUNDAY, service.id, config=CONFIG, now=NOW)

        assert starts(result) == ["10:00", "10:30", "11:00", "11:30", "12:00", "12:30"]
        listed = {d.date: d for d in list_available_dates(repo, config=CONFIG, now=NOW)}
        assert SUNDAY in listed
        assert listed[SUNDAY].has_exception is True

    def test_capacity_override(self, db, repo):
        """Scenario F: Monday 09:00 capacity 3 filled by three bookings."""
        seed_week(db)
        service = add_service(db)
        add_capacity(db, 3, time(9, 0), day_of_week=1)
        for _ in range(3):
            add_appointment(db, service, at(MONDAY, 9), at(MONDAY, 9, 30))

        result = generate_slots(repo, MONDAY, service.id, config=CONFIG, now=NOW)

        by_start = {slot.display_start: slot for slot in result.slots}
        assert by_start["09:00"].available is False
        assert by_start["09:00"].booking_count == 3
        assert by_start["09:00"].capacity == 3
        assert by_start["09:30"].available is True
        assert by_start["09:30"].capacity == 1

    def test_date_capacity_beats_weekday(self, db, repo):
        seed_week(db)
        service = add_service(db)
        add_capacity(db, 3, time(9, 0), day_of_week=1)
        add_capacity(db, 2, time(9, 0), specific_date=MONDAY)

        result = generate_slots(repo, MONDAY, service.id, config=CONFIG, now=NOW)

        assert result.slots[0].capacity == 2

    def test_slot_length_equals_service_duration(self, db, repo):
        seed_week(db)
        service = add_service(db, duration=45)

        result = generate_slots(repo, MONDAY, service.id, config=CONFIG, now=NOW)

        assert starts(result)[:5] == ["09:00", "09:30", "10:00", "10:30", "11:00"]
        assert "11:30" not in starts(result)
        for slot in result.slots:
            assert slot.end_at - slot.start_at == timedelta(minutes=45)
            assert slot.end_at.time() <= time(12, 0) or slot.start_at.time() >= time(13, 0)
            assert slot.end_at.time() <= time(18, 0)

    def test_partial_closure_skips_overlapping_slots(self, db, repo):
        seed_week(db)
        service = add_service(db)
        add_exception(db, "partial_closed", MONDAY, start_time=time(10, 0), end_time=time(11, 0))

        result = generate_slots(repo, MONDAY, service.id, config=CONFIG, now=NOW)

        assert "09:30" in starts(result)
        assert "10:00" not in starts(result)
        assert "10:30" not in starts(result)
        assert "11:00" in starts(result)

    def test_past_slots_skipped_today(self, db, repo):
        seed_week(db)
        service = add_service(db)

        result = generate_slots(repo, MONDAY, service.id, config=NO_CUTOFF, now=at(MONDAY, 10, 10))

        assert starts(result)[:3] == ["10:30", "11:00", "11:30"]
        assert len(result.slots) == 13

    def test_cancelled_appointments_ignored(self, db, repo):
        seed_week(db)
        service = add_service(db)
        add_appointment(db, service, at(MONDAY, 10), at(MONDAY, 10, 30), status="cancelled")

        result = generate_slots(repo, MONDAY, service.id, config=CONFIG, now=NOW)

        assert all(slot.available for slot in result.slots)

    def test_staff_filter(self, db, repo):
        seed_week(db)
        service = add_service(db)
        sato = add_staff(db, "Dr. Sato")
        ito = add_staff(db, "Dr. Ito")
        add_appointment(db, service, at(MONDAY, 10), at(MONDAY, 10, 30), staff_id=sato.id)
        add_appointment(db, service, at(MONDAY, 11), at(MONDAY, 11, 30))

        def unavailable(staff_id):
            result = generate_slots(repo, MONDAY, service.id, staff_id, config=CONFIG, now=NOW)
            return [s.display_start for s in result.slots if not s.available]

        assert unavailable(sato.id) == ["10:00", "11:00"]
        # Unstaffed bookings count against every staff member
        assert unavailable(ito.id) == ["11:00"]
        assert unavailable(None) == ["10:00", "11:00"]

    def test_cutoff_boundary(self, db, repo):
        """Booking for Monday closes Saturday 21:00 with cutoff 2 days / 3 hours."""
        seed_week(db)
        service = add_service(db)
        cutoff = datetime(2026, 3, 7, 21, 0)

        assert generate_slots(repo, MONDAY, service.id, config=CONFIG, now=cutoff).error is None
        late = generate_slots(repo, MONDAY, service.id, config=CONFIG, now=cutoff + timedelta(seconds=1))
        assert late.error == "booking window closed for this date"
        assert late.slots == []

    def test_beyond_horizon(self, db, repo):
        seed_week(db)
        service = add_service(db)

        result = generate_slots(repo, date(2026, 4, 25), service.id, config=CONFIG, now=NOW)

        assert result.error == "beyond booking horizon"

    def test_invalid_date(self, db, repo):
        service = add_service(db)
        result = generate_slots(repo, "2026-13-01", service.id, config=CONFIG, now=NOW)
        assert result.error == "invalid date"

    def test_inactive_service(self, db, repo):
        seed_week(db)
        service = add_service(db, is_active=0)
        result = generate_slots(repo, MONDAY, service.id, config=CONFIG, now=NOW)
        assert result.error == "invalid service"

    def test_closed_weekday(self, db, repo):
        seed_week(db)
        service = add_service(db)
        result = generate_slots(repo, SUNDAY, service.id, config=CONFIG, now=NOW)
        assert result.error == "closed"

    def test_step_independent_of_duration(self, db, repo):
        seed_week(db)
        service = add_service(db, duration=60)
        config = SettingsSnapshot(slot_duration_minutes=15)

        result = generate_slots(repo, MONDAY, service.id, config=config, now=NOW)

        assert starts(result)[:3] == ["09:00", "09:15", "09:30"]
        assert starts(result)[-1] == "17:00"
