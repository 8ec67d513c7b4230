# backend/clinic_booking/services/slots/validator.py
"""
Booking Validator: re-checks a proposed window at commit time.

Independent of whatever the client saw as "available"; every rule of the
slot generator is derived again from storage:
✓ interval parses, start < end, length == service duration
✓ horizon and cutoff of the start date
✓ start strictly after now
✓ day open, window inside one open period and outside a partial closure
✓ start on the slot grid of that period (open + n * slot_duration_minutes)
✓ active service, active staff (when given)
✓ overlapping confirmed bookings < capacity at the start time-of-day

The validator alone does not stop concurrent double-booking; the booking
writer runs it again under the per-day lock (see services/appointments.py).
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from ...config import settings as app_settings
from .capacity import resolve_capacity
from .config import SettingsSnapshot, clinic_now, clinic_weekday, parse_timestamp
from .errors import (
    ALREADY_BOOKED,
    INVALID_DATETIME,
    INVALID_INTERVAL,
    INVALID_SERVICE,
    INVALID_STAFF,
    OFF_GRID,
    OUTSIDE_HOURS,
    PAST_TIME,
    ErrorKind,
)
from .schedule import ScheduleResolver
from .window import booking_window_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: str | None = None
    error_kind: ErrorKind | None = None
    start_at: datetime | None = None
    end_at: datetime | None = None

    @classmethod
    def rejected(cls, error: str, kind: ErrorKind) -> "ValidationResult":
        return cls(valid=False, error=error, error_kind=kind)


def validate_booking(
    repo,
    start_at: datetime | str,
    end_at: datetime | str | None,
    service_id: int | None,
    staff_id: int | None = None,
    config: SettingsSnapshot | None = None,
    now: datetime | None = None,
    cache=None,
    check_window: bool = True,
) -> ValidationResult:
    """
    Validate a booking window.

    Timestamps may be ISO-8601 strings or datetimes; aware values are
    converted to clinic wall-clock time. end_at=None books exactly the
    service duration from start_at.

    Args:
        check_window: False skips horizon and cutoff (admin phone bookings)

    Returns:
        ValidationResult; on success carries the normalised start/end.
    """
    config = config or repo.settings_snapshot()
    tz = app_settings.tz
    now = now or clinic_now(tz)

    # Step 1: Interval
    start = parse_timestamp(start_at, tz)
    end = parse_timestamp(end_at, tz) if end_at is not None else None
    if start is None or (end_at is not None and end is None):
        return ValidationResult.rejected(INVALID_DATETIME, ErrorKind.INPUT)
    if end is not None and start >= end:
        return ValidationResult.rejected(INVALID_INTERVAL, ErrorKind.INPUT)

    # Step 2: Horizon and cutoff
    target_date = start.date()
    if check_window:
        window_error = booking_window_error(target_date, now, config)
        if window_error:
            return ValidationResult.rejected(window_error, ErrorKind.POLICY)

    # Step 3: No retroactive booking
    if start <= now:
        return ValidationResult.rejected(PAST_TIME, ErrorKind.POLICY)

    # Step 4: Day open
    day = ScheduleResolver(repo, config, cache).resolve(target_date)
    if not day.is_open:
        return ValidationResult.rejected(day.closure_reason, ErrorKind.POLICY)

    # Step 5: Service
    if service_id is None:
        return ValidationResult.rejected(INVALID_SERVICE, ErrorKind.INPUT)
    service = repo.get_active_service(service_id)
    if not service:
        return ValidationResult.rejected(INVALID_SERVICE, ErrorKind.POLICY)
    duration = timedelta(minutes=service.duration_minutes)
    if end is None:
        end = start + duration
    elif end - start != duration:
        return ValidationResult.rejected(INVALID_INTERVAL, ErrorKind.INPUT)

    # Step 6: Staff
    if staff_id is not None and not repo.get_active_staff(staff_id):
        return ValidationResult.rejected(INVALID_STAFF, ErrorKind.POLICY)

    # Step 7: Opening hours, on a slot the generator would offer
    period = None
    if end.date() == target_date:
        period = next((p for p in day.periods if p.contains(start.time(), end.time())), None)
    if period is None:
        return ValidationResult.rejected(OUTSIDE_HOURS, ErrorKind.POLICY)
    if day.blocked is not None and day.blocked.overlaps(start.time(), end.time()):
        return ValidationResult.rejected(OUTSIDE_HOURS, ErrorKind.POLICY)
    if not period.on_grid(start.time(), config.slot_duration_minutes):
        return ValidationResult.rejected(OFF_GRID, ErrorKind.INPUT)

    # Step 8: Capacity-aware conflict check
    booked = len(repo.list_confirmed_overlapping(start, end, staff_id))
    capacity = resolve_capacity(
        repo, clinic_weekday(target_date), start.time(), config, specific_date=target_date
    )
    if booked >= capacity:
        logger.info(f"Booking rejected: {start} - {end} has {booked}/{capacity} bookings (staff={staff_id})")
        return ValidationResult.rejected(ALREADY_BOOKED, ErrorKind.CONFLICT)

    return ValidationResult(valid=True, start_at=start, end_at=end)
