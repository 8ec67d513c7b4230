# backend/clinic_booking/services/slots/invalidator.py
"""
Cache invalidation for resolved day schedules.

Triggers:
✓ Weekly business hours changed → invalidate all dates
✓ Booking settings changed (lunch break) → invalidate all dates
✓ Holiday created/deleted → invalidate that date
✓ Schedule exception created/updated/deleted → invalidate affected dates

Does NOT trigger:
✗ Appointment created/cancelled (never cached)
✗ Slot capacity changes (read on every slot generation)
"""

import logging
from datetime import date

from redis import Redis

from .redis_store import ScheduleRedisStore
from .schedule import date_range

logger = logging.getLogger(__name__)


def invalidate_schedule_cache(
    redis: Redis | None,
    dates: list[date] | None = None,
) -> int:
    """
    Invalidate cached days.

    Args:
        redis: Redis client, or None when caching is disabled
        dates: List of specific dates to invalidate,
               or None to invalidate all cached dates

    Returns:
        Number of deleted cache keys
    """
    if redis is None:
        return 0
    store = ScheduleRedisStore(redis)
    deleted = store.delete_days(dates)
    logger.info(f"Schedule cache invalidated: {deleted} keys ({'all' if not dates else len(dates)} dates)")
    return deleted


def get_affected_dates(
    date_start: date,
    date_end: date,
) -> list[date]:
    """
    Get list of dates in range [date_start, date_end].

    Args:
        date_start: Start date (inclusive)
        date_end: End date (inclusive)

    Returns:
        List of dates
    """
    if date_start > date_end:
        date_start, date_end = date_end, date_start
    return date_range(date_start, date_end)


def get_affected_dates_from_exception(exception) -> list[date]:
    """
    Extract affected dates from a schedule exception.

    Args:
        exception: ScheduleExceptions row with start_date, end_date

    Returns:
        List of dates
    """
    return get_affected_dates(exception.start_date, exception.end_date)
