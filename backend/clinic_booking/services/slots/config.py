# backend/clinic_booking/services/slots/config.py
"""
Booking settings snapshot for the availability engine.

The `settings` table is a key → value map edited by admins. Every engine
call receives an immutable snapshot of it instead of reading the table
ad hoc, so resolvers are pure given their inputs.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Mapping

import pytz

DEFAULT_CUTOFF_DAYS = 2
DEFAULT_CUTOFF_HOURS = 3
DEFAULT_MAX_DAYS_AHEAD = 60
DEFAULT_SLOT_DURATION_MINUTES = 30
DEFAULT_SLOT_CAPACITY = 1


@dataclass(frozen=True)
class SettingsSnapshot:
    """
    Booking settings.

    Attributes:
        cutoff_days: Days before the target date on which booking closes
        cutoff_hours: Booking closes at (24 - cutoff_hours):00 of that day
        max_days_ahead: Booking horizon (today + max_days_ahead)
        slot_duration_minutes: Generation increment, independent of service duration
        default_slot_capacity: Simultaneous bookings when no override exists
        lunch_start / lunch_end: Lunch break for weekdays configured with
            the legacy single open/close pair
    """
    cutoff_days: int = DEFAULT_CUTOFF_DAYS
    cutoff_hours: int = DEFAULT_CUTOFF_HOURS
    max_days_ahead: int = DEFAULT_MAX_DAYS_AHEAD
    slot_duration_minutes: int = DEFAULT_SLOT_DURATION_MINUTES
    default_slot_capacity: int = DEFAULT_SLOT_CAPACITY
    lunch_start: time | None = None
    lunch_end: time | None = None

    def __post_init__(self):
        """Validate configuration."""
        if self.slot_duration_minutes < 1:
            raise ValueError(f"slot_duration_minutes must be >= 1, got {self.slot_duration_minutes}")
        if self.default_slot_capacity < 1:
            raise ValueError(f"default_slot_capacity must be >= 1, got {self.default_slot_capacity}")
        if not 0 <= self.cutoff_hours <= 24:
            raise ValueError(f"cutoff_hours must be within 0..24, got {self.cutoff_hours}")

    @classmethod
    def from_mapping(cls, values: Mapping[str, str | None]) -> "SettingsSnapshot":
        """
        Build a snapshot from raw settings rows.

        Absent or non-numeric values fall back to the defaults
        (2, 3, 60, 30, 1).
        """
        return cls(
            cutoff_days=_int_setting(values, "booking_cutoff_days", DEFAULT_CUTOFF_DAYS, minimum=0),
            cutoff_hours=_int_setting(
                values, "booking_cutoff_hours", DEFAULT_CUTOFF_HOURS, minimum=0, maximum=24
            ),
            max_days_ahead=_int_setting(values, "booking_max_days_ahead", DEFAULT_MAX_DAYS_AHEAD, minimum=0),
            slot_duration_minutes=_int_setting(
                values, "slot_duration_minutes", DEFAULT_SLOT_DURATION_MINUTES, minimum=1
            ),
            default_slot_capacity=_int_setting(
                values, "default_slot_capacity", DEFAULT_SLOT_CAPACITY, minimum=1
            ),
            lunch_start=parse_time_str(values.get("lunch_start")),
            lunch_end=parse_time_str(values.get("lunch_end")),
        )

    @property
    def has_lunch_break(self) -> bool:
        return (
            self.lunch_start is not None
            and self.lunch_end is not None
            and self.lunch_start < self.lunch_end
        )

    def horizon_date(self, today: date) -> date:
        """Furthest bookable date."""
        return today + timedelta(days=self.max_days_ahead)

    def cutoff_instant(self, target_date: date) -> datetime:
        """
        Last instant at which bookings for target_date are accepted.

        cutoff_days=2, cutoff_hours=3, target 2026-03-10 → 2026-03-08 21:00.
        """
        cutoff_day = target_date - timedelta(days=self.cutoff_days)
        return datetime.combine(cutoff_day, time.min) + timedelta(hours=24 - self.cutoff_hours)


def _int_setting(
    values: Mapping[str, str | None],
    key: str,
    default: int,
    minimum: int | None = None,
    maximum: int | None = None,
) -> int:
    raw = values.get(key)
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    if minimum is not None and value < minimum:
        return default
    if maximum is not None and value > maximum:
        return default
    return value


# ── Time helpers ─────────────────────────────────────────────────────────


def time_str_to_minutes(value: str) -> int:
    """Convert "HH:MM" (or "HH:MM:SS") to minutes since midnight."""
    parts = value.split(":")
    return int(parts[0]) * 60 + int(parts[1])


def parse_time_str(value) -> time | None:
    """Parse "HH:MM" / "HH:MM:SS" into time. Returns None for empty or invalid input."""
    if value is None:
        return None
    if isinstance(value, time):
        return value
    value = str(value).strip()
    if not value:
        return None
    try:
        minutes = time_str_to_minutes(value)
    except (ValueError, IndexError):
        return None
    if not 0 <= minutes < 24 * 60:
        return None
    return time(minutes // 60, minutes % 60)


def format_time(value: time | datetime) -> str:
    """Format as "HH:MM"."""
    return f"{value.hour:02d}:{value.minute:02d}"


def clinic_weekday(value: date) -> int:
    """Weekday with 0 = Sunday .. 6 = Saturday."""
    return (value.weekday() + 1) % 7


# ── Clock / timezone helpers ─────────────────────────────────────────────


def clinic_now(tz) -> datetime:
    """Current naive wall-clock time in the clinic timezone."""
    return datetime.now(tz).replace(tzinfo=None)


def to_clinic_naive(value: datetime, tz) -> datetime:
    """Aware datetimes are converted to clinic wall-clock; naive ones are taken as-is."""
    if value.tzinfo is None:
        return value
    return value.astimezone(tz).replace(tzinfo=None)


def to_clinic_iso(value: datetime, tz) -> str:
    """ISO-8601 with the clinic's UTC offset."""
    if isinstance(tz, pytz.BaseTzInfo):
        return tz.localize(value).isoformat()
    return value.replace(tzinfo=tz).isoformat()


def parse_timestamp(value, tz) -> datetime | None:
    """Parse an ISO-8601 timestamp to naive clinic time. Returns None if invalid."""
    if isinstance(value, datetime):
        return to_clinic_naive(value, tz)
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    return to_clinic_naive(parsed, tz)


def parse_date(value) -> date | None:
    """Parse "YYYY-MM-DD". Returns None if invalid."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def parse_id(value) -> int | None:
    """Parse a positive integer id from a query string. Returns None if invalid."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value if value > 0 else None
    if not isinstance(value, str) or not value.strip().isdigit():
        return None
    parsed = int(value.strip())
    return parsed if parsed > 0 else None
