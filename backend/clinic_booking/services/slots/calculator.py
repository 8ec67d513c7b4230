# backend/clinic_booking/services/slots/calculator.py
"""
Slot Generator: bookable windows for a service on one date.

Preconditions (first failure short-circuits with an empty slot list):
✓ date parses
✓ date within horizon
✓ now before the cutoff instant of the date
✓ day open (Schedule Resolver)
✓ service exists and is active

Generation walks each open period in slot_duration_minutes steps while
start + service duration <= close. Slots overlapping a partial closure
or not strictly after now are skipped. Every other candidate is emitted,
flagged available when overlapping confirmed bookings < capacity.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from ...config import settings as app_settings
from .capacity import load_capacity_table
from .config import SettingsSnapshot, clinic_now, clinic_weekday, format_time, parse_date
from .errors import INVALID_DATE, INVALID_SERVICE, ErrorKind
from .schedule import Period, ScheduleResolver
from .window import booking_window_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Slot:
    """A candidate window sized to the service duration."""
    start_at: datetime
    end_at: datetime
    available: bool
    booking_count: int = 0
    capacity: int = 1

    @property
    def display_start(self) -> str:
        return format_time(self.start_at)

    @property
    def display_end(self) -> str:
        return format_time(self.end_at)


@dataclass
class SlotsResult:
    slots: list[Slot] = field(default_factory=list)
    error: str | None = None
    error_kind: ErrorKind | None = None

    @classmethod
    def failed(cls, error: str, kind: ErrorKind) -> "SlotsResult":
        return cls(slots=[], error=error, error_kind=kind)


def generate_slots(
    repo,
    target_date: date | str,
    service_id: int | None,
    staff_id: int | None = None,
    config: SettingsSnapshot | None = None,
    now: datetime | None = None,
    cache=None,
) -> SlotsResult:
    """
    Calculate slots for a service on target_date.

    Args:
        repo: BookingRepository
        staff_id: Preferred staff; None = no preference (count every booking)
        now: Naive clinic wall-clock time (defaults to the current time)
        cache: ScheduleRedisStore or None

    Returns:
        SlotsResult with slots ordered by start time, or an error.
    """
    config = config or repo.settings_snapshot()
    now = now or clinic_now(app_settings.tz)

    # Step 1: Validate date and booking window
    parsed_date = parse_date(target_date)
    if parsed_date is None:
        return SlotsResult.failed(INVALID_DATE, ErrorKind.INPUT)

    window_error = booking_window_error(parsed_date, now, config)
    if window_error:
        return SlotsResult.failed(window_error, ErrorKind.POLICY)

    # Step 2: Effective schedule of the day
    day = ScheduleResolver(repo, config, cache).resolve(parsed_date)
    if not day.is_open:
        return SlotsResult.failed(day.closure_reason, ErrorKind.POLICY)

    # Step 3: Service
    if service_id is None:
        return SlotsResult.failed(INVALID_SERVICE, ErrorKind.INPUT)
    service = repo.get_active_service(service_id)
    if not service:
        return SlotsResult.failed(INVALID_SERVICE, ErrorKind.POLICY)

    duration = timedelta(minutes=service.duration_minutes)
    step = timedelta(minutes=config.slot_duration_minutes)

    # Step 4: Existing bookings and capacity overrides for the day
    appointments = repo.list_confirmed_on_day(parsed_date, staff_id)
    capacities = load_capacity_table(repo, clinic_weekday(parsed_date), config, parsed_date)

    # Step 5: Walk the periods
    slots: list[Slot] = []
    for period in day.periods:
        current = datetime.combine(parsed_date, period.open)
        close = datetime.combine(parsed_date, period.close)

        while current + duration <= close:
            slot_end = current + duration

            if not _is_blocked(day.blocked, current, slot_end) and current > now:
                booked = count_overlapping(appointments, current, slot_end)
                capacity = capacities.resolve(current.time())
                slots.append(Slot(
                    start_at=current,
                    end_at=slot_end,
                    available=booked < capacity,
                    booking_count=booked,
                    capacity=capacity,
                ))

            current += step

    logger.debug(
        f"Generated {len(slots)} slots for service {service_id} on {parsed_date} (staff={staff_id})"
    )
    return SlotsResult(slots=slots)


def count_overlapping(appointments: list, start_at: datetime, end_at: datetime) -> int:
    """Appointments with existing.start < end AND existing.end > start."""
    return sum(
        1 for apt in appointments
        if apt.start_at < end_at and apt.end_at > start_at
    )


def _is_blocked(blocked: Period | None, start_at: datetime, end_at: datetime) -> bool:
    if blocked is None:
        return False
    return blocked.overlaps(start_at.time(), end_at.time())
