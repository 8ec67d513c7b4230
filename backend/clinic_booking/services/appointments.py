"""
Appointment writer.

Booking is check-then-act: the validator's answer is only trustworthy if
nothing else books the same interval between the check and the insert.
Every write for a calendar date first takes that date's row in
`booking_locks`:

- PostgreSQL: UPDATE takes a row lock held until commit
- SQLite: the UPDATE acquires the database write lock

The validator is then run again inside the transaction, so at most
`capacity` confirmed bookings can exist for an overlapping interval.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models.generated import Appointments, BookingLocks, Patients
from .slots.capacity import resolve_capacity
from .slots.config import SettingsSnapshot, clinic_weekday
from .slots.errors import ALREADY_BOOKED, ErrorKind
from .slots.repository import CONFIRMED, BookingRepository
from .slots.validator import ValidationResult, validate_booking

logger = logging.getLogger(__name__)

APPOINTMENT_STATUSES = ("confirmed", "cancelled", "completed")

# Concurrent first writers for a date race to insert its lock row
MAX_LOCK_ATTEMPTS = 3


@dataclass
class PatientData:
    name: str
    kana: str
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None


@dataclass
class BookingOutcome:
    appointment: Optional[Appointments]
    validation: ValidationResult

    @property
    def ok(self) -> bool:
        return self.appointment is not None


def create_appointment(
    db: Session,
    patient: PatientData,
    service_id: int,
    staff_id: int | None,
    start_at: datetime | str,
    end_at: datetime | str | None,
    notes: str | None = None,
    config: SettingsSnapshot | None = None,
    now: datetime | None = None,
    cache=None,
    check_window: bool = True,
) -> BookingOutcome:
    """
    Validate and insert a confirmed appointment.

    Steps:
    1. Validate (cheap rejection without locking)
    2. Lock the date
    3. Validate again under the lock
    4. Find or create the patient, insert, commit

    check_window=False is used for admin phone bookings, which ignore
    cutoff and horizon but not hours or capacity.
    """
    repo = BookingRepository(db)
    config = config or repo.settings_snapshot()

    attempt = 1
    while True:
        try:
            return _create_once(
                db, repo, patient, service_id, staff_id,
                start_at, end_at, notes, config, now, cache, check_window,
            )
        except IntegrityError:
            db.rollback()
            if attempt >= MAX_LOCK_ATTEMPTS:
                raise
            logger.warning(f"Booking lock contention, retrying (attempt {attempt})")
            attempt += 1


def _create_once(
    db: Session,
    repo: BookingRepository,
    patient: PatientData,
    service_id: int,
    staff_id: int | None,
    start_at,
    end_at,
    notes: str | None,
    config: SettingsSnapshot,
    now: datetime | None,
    cache,
    check_window: bool,
) -> BookingOutcome:
    result = validate_booking(
        repo, start_at, end_at, service_id, staff_id, config, now, cache, check_window
    )
    if not result.valid:
        return BookingOutcome(None, result)

    try:
        acquire_day_lock(db, result.start_at.date())

        # Recount under the lock
        result = validate_booking(
            repo, start_at, end_at, service_id, staff_id, config, now, cache, check_window
        )
        if not result.valid:
            db.rollback()
            return BookingOutcome(None, result)

        patient_row = find_or_create_patient(db, patient)

        appointment = Appointments(
            patient_id=patient_row.id,
            service_id=service_id,
            staff_id=staff_id,
            start_at=result.start_at,
            end_at=result.end_at,
            status=CONFIRMED,
            notes=notes,
        )
        db.add(appointment)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(appointment)
    logger.info(
        f"Appointment {appointment.id} booked: service={service_id} staff={staff_id} "
        f"{appointment.start_at} - {appointment.end_at}"
    )
    return BookingOutcome(appointment, result)


def acquire_day_lock(db: Session, lock_date: date) -> None:
    """Take the write lock for lock_date inside the current transaction."""
    updated = (
        db.query(BookingLocks)
        .filter(BookingLocks.lock_date == lock_date)
        .update({BookingLocks.version: BookingLocks.version + 1}, synchronize_session=False)
    )
    if not updated:
        # First booking for this date; a concurrent creator gets IntegrityError
        db.add(BookingLocks(lock_date=lock_date, version=1))
        db.flush()


def normalize_phone(phone: str) -> str:
    """Strip separators: "090-1234 5678" → "09012345678"."""
    return re.sub(r"[-\s]", "", phone)


def find_or_create_patient(db: Session, data: PatientData) -> Patients:
    """
    Match by phone (or email when given); update the stored name on match.

    A patient with neither phone nor email is always created.
    """
    phone = normalize_phone(data.phone)

    conditions = []
    if phone:
        conditions.append(Patients.phone == phone)
    if data.email:
        conditions.append(Patients.email == data.email)

    patient = None
    if conditions:
        patient = db.query(Patients).filter(or_(*conditions)).order_by(Patients.id).first()

    if patient is None:
        patient = Patients(
            name=data.name,
            kana=data.kana,
            phone=phone,
            email=data.email,
            address=data.address,
        )
        db.add(patient)
        db.flush()
        return patient

    patient.name = data.name
    if data.kana:
        patient.kana = data.kana
    if data.email:
        patient.email = data.email
    if data.address:
        patient.address = data.address
    patient.updated_at = func.now()
    db.flush()
    return patient


def update_appointment(
    db: Session,
    appointment: Appointments,
    status: str | None = None,
    notes: str | None = None,
    config: SettingsSnapshot | None = None,
) -> ValidationResult:
    """
    Admin edit of status and/or notes.

    Re-confirming a cancelled/completed appointment re-checks capacity
    under the day lock; cutoff and horizon do not apply to admin edits.
    """
    if status is not None and status not in APPOINTMENT_STATUSES:
        return ValidationResult.rejected(f"invalid status: {status}", ErrorKind.INPUT)

    try:
        if status == CONFIRMED and appointment.status != CONFIRMED:
            repo = BookingRepository(db)
            config = config or repo.settings_snapshot()
            acquire_day_lock(db, appointment.start_at.date())
            if not _has_capacity(repo, appointment, config):
                db.rollback()
                return ValidationResult.rejected(ALREADY_BOOKED, ErrorKind.CONFLICT)

        if status is not None:
            appointment.status = status
        if notes is not None:
            appointment.notes = notes
        appointment.updated_at = func.now()
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(appointment)
    logger.info(f"Appointment {appointment.id} updated: status={appointment.status}")
    return ValidationResult(valid=True, start_at=appointment.start_at, end_at=appointment.end_at)


def delete_appointment(db: Session, appointment: Appointments) -> None:
    appointment_id = appointment.id
    db.delete(appointment)
    db.commit()
    logger.info(f"Appointment {appointment_id} deleted")


def _has_capacity(repo: BookingRepository, appointment: Appointments, config: SettingsSnapshot) -> bool:
    others = [
        apt for apt in repo.list_confirmed_overlapping(
            appointment.start_at, appointment.end_at, appointment.staff_id
        )
        if apt.id != appointment.id
    ]
    target_date = appointment.start_at.date()
    capacity = resolve_capacity(
        repo, clinic_weekday(target_date), appointment.start_at.time(), config, specific_date=target_date
    )
    return len(others) < capacity
