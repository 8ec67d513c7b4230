# backend/clinic_booking/services/slots/window.py
"""
Booking window rules shared by slots, validation and the date calendar.

horizon: target_date <= today + max_days_ahead
cutoff:  now <= (target_date - cutoff_days) at (24 - cutoff_hours):00
"""

from datetime import date, datetime

from .config import SettingsSnapshot
from .errors import BEYOND_HORIZON, WINDOW_CLOSED


def is_within_horizon(target_date: date, now: datetime, config: SettingsSnapshot) -> bool:
    return target_date <= config.horizon_date(now.date())


def is_before_cutoff(target_date: date, now: datetime, config: SettingsSnapshot) -> bool:
    return now <= config.cutoff_instant(target_date)


def booking_window_error(
    target_date: date,
    now: datetime,
    config: SettingsSnapshot,
) -> str | None:
    """Return the policy error for target_date, or None when booking is open."""
    if not is_within_horizon(target_date, now, config):
        return BEYOND_HORIZON
    if not is_before_cutoff(target_date, now, config):
        return WINDOW_CLOSED
    return None
