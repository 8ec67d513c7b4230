# backend/clinic_booking/services/slots/schedule.py
"""
Schedule Resolver: effective open periods for one calendar date.

Sources, highest precedence first:
✓ holidays (full-day closure)
✓ schedule exceptions: closed > partial_closed > modified_hours > special_open
✓ weekly business hours (morning/afternoon pairs, or a legacy single pair)

A partial_closed exception does not change the periods; its blocked
sub-range is carried separately and filtered out at slot level.
"""

import logging
from dataclasses import dataclass
from datetime import date, time, timedelta

from .config import SettingsSnapshot, clinic_weekday, format_time, parse_time_str
from .errors import HOLIDAY_REASON, TEMPORARY_CLOSURE_REASON, WEEKLY_CLOSED_REASON

logger = logging.getLogger(__name__)

CLOSED = "closed"
PARTIAL_CLOSED = "partial_closed"
MODIFIED_HOURS = "modified_hours"
SPECIAL_OPEN = "special_open"

EXCEPTION_PRECEDENCE = {
    CLOSED: 1,
    PARTIAL_CLOSED: 2,
    MODIFIED_HOURS: 3,
    SPECIAL_OPEN: 4,
}
EXCEPTION_TYPES = tuple(EXCEPTION_PRECEDENCE)


@dataclass(frozen=True)
class Period:
    """Half-open time-of-day range [open, close)."""
    open: time
    close: time

    def overlaps(self, start: time, end: time) -> bool:
        return start < self.close and end > self.open

    def contains(self, start: time, end: time) -> bool:
        return self.open <= start and end <= self.close

    def on_grid(self, start: time, step_minutes: int) -> bool:
        """True when start is open + n * step, the times the slot generator offers."""
        offset = (start.hour * 60 + start.minute) - (self.open.hour * 60 + self.open.minute)
        return start.second == 0 and start.microsecond == 0 and offset % step_minutes == 0

    def to_list(self) -> list[str]:
        return [format_time(self.open), format_time(self.close)]

    @classmethod
    def from_list(cls, value: list[str]) -> "Period":
        return cls(parse_time_str(value[0]), parse_time_str(value[1]))


@dataclass(frozen=True)
class ResolvedDay:
    """Effective schedule of one date."""
    date: date
    is_open: bool
    periods: tuple[Period, ...] = ()
    closure_reason: str | None = None
    blocked: Period | None = None
    exception_type: str | None = None

    @classmethod
    def closed(
        cls,
        target_date: date,
        reason: str,
        exception_type: str | None = None,
    ) -> "ResolvedDay":
        return cls(
            date=target_date,
            is_open=False,
            closure_reason=reason,
            exception_type=exception_type,
        )

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "is_open": self.is_open,
            "periods": [p.to_list() for p in self.periods],
            "closure_reason": self.closure_reason,
            "blocked": self.blocked.to_list() if self.blocked else None,
            "exception_type": self.exception_type,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ResolvedDay":
        return cls(
            date=date.fromisoformat(data["date"]),
            is_open=data["is_open"],
            periods=tuple(Period.from_list(p) for p in data["periods"]),
            closure_reason=data.get("closure_reason"),
            blocked=Period.from_list(data["blocked"]) if data.get("blocked") else None,
            exception_type=data.get("exception_type"),
        )


def resolve_day(
    target_date: date,
    hours,
    holiday,
    exceptions: list,
    config: SettingsSnapshot,
) -> ResolvedDay:
    """
    Resolve the effective schedule of target_date.

    Args:
        hours: BusinessHours row for the weekday, or None
        holiday: Holidays row for the date, or None
        exceptions: ScheduleExceptions rows (rows not covering the date are ignored)
    """
    if holiday is not None:
        return ResolvedDay.closed(target_date, holiday.name or HOLIDAY_REASON)

    exception = pick_exception(exceptions, target_date)
    kind = exception.exception_type if exception is not None else None

    if kind == CLOSED:
        return ResolvedDay.closed(
            target_date, exception.reason or TEMPORARY_CLOSURE_REASON, exception_type=kind
        )

    if kind == MODIFIED_HOURS:
        periods = _exception_periods(exception)
        is_open = True
    elif kind == SPECIAL_OPEN:
        periods = _special_open_periods(exception, hours, config)
        is_open = True
    else:
        periods = _weekday_periods(hours, config)
        is_open = hours is not None and not hours.is_closed

    if not is_open or not periods:
        return ResolvedDay.closed(target_date, WEEKLY_CLOSED_REASON, exception_type=kind)

    blocked = None
    if kind == PARTIAL_CLOSED:
        blocked = _pair(exception.start_time, exception.end_time)

    return ResolvedDay(
        date=target_date,
        is_open=True,
        periods=tuple(sorted(periods, key=lambda p: p.open)),
        blocked=blocked,
        exception_type=kind,
    )


def pick_exception(exceptions: list, target_date: date):
    """Highest-precedence exception covering target_date, or None."""
    matching = [
        exc for exc in exceptions
        if exc.exception_type in EXCEPTION_PRECEDENCE
        and exc.start_date <= target_date <= exc.end_date
    ]
    if not matching:
        return None
    return min(matching, key=lambda exc: EXCEPTION_PRECEDENCE[exc.exception_type])


# ── Period helpers ───────────────────────────────────────────────────────


def _pair(open_value, close_value) -> Period | None:
    """Period from an open/close pair; None when either side is empty or inverted."""
    open_time = parse_time_str(open_value)
    close_time = parse_time_str(close_value)
    if open_time is None or close_time is None or open_time >= close_time:
        return None
    return Period(open_time, close_time)


def _exception_periods(exception) -> list[Period]:
    pairs = [
        _pair(exception.morning_open, exception.morning_close),
        _pair(exception.afternoon_open, exception.afternoon_close),
    ]
    return [p for p in pairs if p is not None]


def _special_open_periods(exception, hours, config: SettingsSnapshot) -> list[Period]:
    """Exception pairs, falling back per pair to the weekday's own pairs."""
    morning = _pair(exception.morning_open, exception.morning_close)
    afternoon = _pair(exception.afternoon_open, exception.afternoon_close)

    if morning is None and afternoon is None:
        return _weekday_periods(hours, config)

    if hours is not None:
        morning = morning or _pair(hours.morning_open, hours.morning_close)
        afternoon = afternoon or _pair(hours.afternoon_open, hours.afternoon_close)
    return [p for p in (morning, afternoon) if p is not None]


def _weekday_periods(hours, config: SettingsSnapshot) -> list[Period]:
    if hours is None:
        return []

    periods = [
        p for p in (
            _pair(hours.morning_open, hours.morning_close),
            _pair(hours.afternoon_open, hours.afternoon_close),
        )
        if p is not None
    ]
    if periods:
        return periods

    legacy = _pair(hours.open_time, hours.close_time)
    if legacy is None:
        return []
    if config.has_lunch_break:
        return _split_around_lunch(legacy, config.lunch_start, config.lunch_end)
    return [legacy]


def _split_around_lunch(period: Period, lunch_start: time, lunch_end: time) -> list[Period]:
    if not period.overlaps(lunch_start, lunch_end):
        return [period]
    pieces = []
    if period.open < lunch_start:
        pieces.append(Period(period.open, lunch_start))
    if lunch_end < period.close:
        pieces.append(Period(lunch_end, period.close))
    return pieces


# ── Resolver with storage and cache ──────────────────────────────────────


class ScheduleResolver:
    """
    Resolves dates against storage, optionally through the Redis cache.

    Cached and freshly resolved days are identical.
    """

    def __init__(self, repo, config: SettingsSnapshot, cache=None):
        self.repo = repo
        self.config = config
        self.cache = cache

    def resolve(self, target_date: date) -> ResolvedDay:
        if self.cache is not None:
            cached = self.cache.get_day(target_date)
            if cached is not None:
                return cached

        resolved = resolve_day(
            target_date,
            hours=self.repo.get_business_hours(clinic_weekday(target_date)),
            holiday=self.repo.get_holiday(target_date),
            exceptions=self.repo.list_exceptions(target_date),
            config=self.config,
        )

        if self.cache is not None:
            self.cache.store_day(resolved)
        return resolved

    def resolve_range(self, start: date, end: date) -> dict[date, ResolvedDay]:
        """Resolve every date in [start, end] with one batch of reads."""
        dates = date_range(start, end)
        result: dict[date, ResolvedDay] = {}

        if self.cache is not None:
            for dt, day in self.cache.get_days(dates).items():
                if day is not None:
                    result[dt] = day

        missing = [dt for dt in dates if dt not in result]
        if not missing:
            return result

        holidays = {h.date: h for h in self.repo.list_holidays(missing[0], missing[-1])}
        exceptions = self.repo.list_exceptions(missing[0], missing[-1])
        weekly = self.repo.list_business_hours()

        fresh = {}
        for dt in missing:
            fresh[dt] = resolve_day(
                dt,
                hours=weekly.get(clinic_weekday(dt)),
                holiday=holidays.get(dt),
                exceptions=exceptions,
                config=self.config,
            )
        result.update(fresh)

        if self.cache is not None:
            self.cache.store_days(list(fresh.values()))

        logger.debug("Resolved %d days (%d from cache)", len(dates), len(dates) - len(missing))
        return result


def date_range(start: date, end: date) -> list[date]:
    dates = []
    current = start
    while current <= end:
        dates.append(current)
        current += timedelta(days=1)
    return dates
