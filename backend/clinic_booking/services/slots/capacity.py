# backend/clinic_booking/services/slots/capacity.py
"""
Capacity Resolver: simultaneous bookings allowed at a time of day.

Lookup order:
1. slot_capacities row for (specific_date, time_slot)
2. slot_capacities row for (day_of_week, time_slot), no specific date
3. default_slot_capacity setting (1 when unset/invalid)

Time of day is matched on the generation grid ("09:00", "09:30", ...).
"""

from dataclasses import dataclass, field
from datetime import date, time

from .config import SettingsSnapshot

SOURCE_DEFAULT = "default"
SOURCE_DAY = "day"
SOURCE_DATE = "date"


@dataclass
class CapacityTable:
    """Capacity overrides for one weekday (and optionally one date)."""
    default: int
    by_weekday: dict[time, int] = field(default_factory=dict)
    by_date: dict[time, int] = field(default_factory=dict)

    def resolve(self, time_of_day: time) -> int:
        return self.lookup(time_of_day)[0]

    def lookup(self, time_of_day: time) -> tuple[int, str]:
        """(capacity, source) for time_of_day."""
        key = _grid_key(time_of_day)
        if key in self.by_date:
            return self.by_date[key], SOURCE_DATE
        if key in self.by_weekday:
            return self.by_weekday[key], SOURCE_DAY
        return self.default, SOURCE_DEFAULT


def load_capacity_table(
    repo,
    weekday: int,
    config: SettingsSnapshot,
    specific_date: date | None = None,
) -> CapacityTable:
    """Load every override relevant to weekday/specific_date in two queries."""
    by_weekday = {
        _grid_key(row.time_slot): max(1, row.capacity)
        for row in repo.list_weekday_capacities(weekday)
    }
    by_date = {}
    if specific_date is not None:
        by_date = {
            _grid_key(row.time_slot): max(1, row.capacity)
            for row in repo.list_date_capacities(specific_date)
        }
    return CapacityTable(
        default=config.default_slot_capacity,
        by_weekday=by_weekday,
        by_date=by_date,
    )


def resolve_capacity(
    repo,
    weekday: int,
    time_of_day: time,
    config: SettingsSnapshot,
    specific_date: date | None = None,
) -> int:
    """Capacity (>= 1) for a single weekday/time-of-day, optionally on a specific date."""
    key = _grid_key(time_of_day)

    if specific_date is not None:
        row = repo.get_capacity_row(key, specific_date=specific_date)
        if row is not None:
            return max(1, row.capacity)

    row = repo.get_capacity_row(key, weekday=weekday)
    if row is not None:
        return max(1, row.capacity)

    return config.default_slot_capacity


def _grid_key(value: time) -> time:
    """Drop seconds so "09:00" and "09:00:00" match."""
    return time(value.hour, value.minute)
