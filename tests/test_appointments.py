"""Tests for the booking writer."""

from datetime import datetime, time

from clinic_booking.models.generated import Appointments, BookingLocks, Patients
from clinic_booking.services.appointments import (
    PatientData,
    acquire_day_lock,
    create_appointment,
    find_or_create_patient,
    normalize_phone,
    update_appointment,
)
from clinic_booking.services.slots import SettingsSnapshot

from conftest import MONDAY, NOW, add_appointment, add_capacity, add_service, seed_week

CONFIG = SettingsSnapshot()
PATIENT = PatientData(name="Yamada Taro", kana="ヤマダ タロウ", phone="090-1234-5678")


def at(hour: int, minute: int = 0) -> datetime:
    return datetime.combine(MONDAY, time(hour, minute))


def book(db, service, start, end, staff_id=None, patient=PATIENT):
    return create_appointment(
        db, patient, service.id, staff_id, start, end, config=CONFIG, now=NOW
    )


class TestCreateAppointment:
    """Tests for create_appointment."""

    def test_books_confirmed_appointment(self, db):
        seed_week(db)
        service = add_service(db)

        outcome = book(db, service, at(10), at(10, 30))

        assert outcome.ok
        apt = outcome.appointment
        assert apt.status == "confirmed"
        assert apt.start_at == at(10)
        assert apt.end_at == at(10, 30)
        assert apt.patient.phone == "09012345678"

    def test_rejection_writes_nothing(self, db):
        seed_week(db)
        service = add_service(db)

        outcome = book(db, service, at(12), at(12, 30))

        assert not outcome.ok
        assert outcome.validation.error == "outside opening hours"
        assert db.query(Appointments).count() == 0
        assert db.query(Patients).count() == 0

    def test_never_exceeds_capacity(self, db):
        seed_week(db)
        service = add_service(db)
        add_capacity(db, 2, time(10, 0), day_of_week=1)

        results = [book(db, service, at(10), at(10, 30)).ok for _ in range(4)]

        assert results == [True, True, False, False]
        confirmed = db.query(Appointments).filter(Appointments.status == "confirmed").count()
        assert confirmed == 2

    def test_day_lock_row_versioned(self, db):
        seed_week(db)
        service = add_service(db)

        book(db, service, at(10), at(10, 30))
        book(db, service, at(11), at(11, 30))

        lock = db.get(BookingLocks, MONDAY)
        assert lock.version == 2

    def test_acquire_creates_then_increments(self, db):
        acquire_day_lock(db, MONDAY)
        acquire_day_lock(db, MONDAY)
        db.commit()
        assert db.get(BookingLocks, MONDAY).version == 2


class TestFindOrCreatePatient:
    """Tests for patient matching."""

    def test_phone_normalized(self):
        assert normalize_phone("090-1234 5678") == "09012345678"

    def test_reuses_patient_by_phone(self, db):
        first = find_or_create_patient(db, PATIENT)
        again = find_or_create_patient(
            db, PatientData(name="Yamada T.", kana="ヤマダ", phone="09012345678")
        )
        db.commit()

        assert again.id == first.id
        assert again.name == "Yamada T."
        assert db.query(Patients).count() == 1

    def test_matches_by_email(self, db):
        first = find_or_create_patient(
            db, PatientData(name="A", kana="エー", phone="0311112222", email="a@example.com")
        )
        again = find_or_create_patient(
            db, PatientData(name="A", kana="エー", phone="0333334444", email="a@example.com")
        )
        assert again.id == first.id


class TestUpdateAppointment:
    """Tests for admin status changes."""

    def test_cancel_frees_capacity(self, db):
        seed_week(db)
        service = add_service(db)
        apt = add_appointment(db, service, at(10), at(10, 30))

        result = update_appointment(db, apt, status="cancelled", config=CONFIG)

        assert result.valid
        assert apt.status == "cancelled"
        assert book(db, service, at(10), at(10, 30)).ok

    def test_reconfirm_rejected_when_full(self, db):
        seed_week(db)
        service = add_service(db)
        cancelled = add_appointment(db, service, at(10), at(10, 30), status="cancelled")
        add_appointment(db, service, at(10), at(10, 30))

        result = update_appointment(db, cancelled, status="confirmed", config=CONFIG)

        assert result.error == "slot already booked"
        db.refresh(cancelled)
        assert cancelled.status == "cancelled"

    def test_invalid_status(self, db):
        seed_week(db)
        service = add_service(db)
        apt = add_appointment(db, service, at(10), at(10, 30))

        result = update_appointment(db, apt, status="no-show")

        assert result.valid is False
        assert apt.status == "confirmed"

    def test_notes_only(self, db):
        seed_week(db)
        service = add_service(db)
        apt = add_appointment(db, service, at(10), at(10, 30))

        update_appointment(db, apt, notes="Bring X-ray")

        assert apt.notes == "Bring X-ray"
        assert apt.status == "confirmed"
