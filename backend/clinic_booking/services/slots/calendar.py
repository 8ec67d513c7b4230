# backend/clinic_booking/services/slots/calendar.py
"""
Date Range Enumerator: bookable calendar dates for date pickers.

For each day offset 0..max_days_ahead from today:
✗ past its cutoff instant
✗ holiday or closed exception
✗ closed weekday without a special_open exception
Everything else is listed. Closure decisions come from the Schedule
Resolver so precedence rules live in one place.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from ...config import settings as app_settings
from .config import SettingsSnapshot, clinic_now, clinic_weekday
from .schedule import ScheduleResolver
from .window import is_before_cutoff


@dataclass(frozen=True)
class AvailableDate:
    date: date
    weekday: int  # 0 = Sunday
    has_exception: bool = False


def list_available_dates(
    repo,
    config: SettingsSnapshot | None = None,
    now: datetime | None = None,
    cache=None,
) -> list[AvailableDate]:
    """List bookable dates from today through the horizon."""
    config = config or repo.settings_snapshot()
    now = now or clinic_now(app_settings.tz)

    today = now.date()
    horizon = config.horizon_date(today)

    candidates = []
    current = today
    while current <= horizon:
        if is_before_cutoff(current, now, config):
            candidates.append(current)
        current += timedelta(days=1)

    if not candidates:
        return []

    resolved = ScheduleResolver(repo, config, cache).resolve_range(candidates[0], candidates[-1])

    dates = []
    for dt in candidates:
        day = resolved[dt]
        if not day.is_open:
            continue
        dates.append(AvailableDate(
            date=dt,
            weekday=clinic_weekday(dt),
            has_exception=day.exception_type is not None,
        ))
    return dates
