# backend/clinic_booking/services/slots/__init__.py
"""
Availability engine.

Schedule Resolver → Capacity Resolver → Slot Generator / Booking Validator
Date Range Enumerator for calendar pickers.
Resolved days are optionally cached in Redis.
"""

from .config import SettingsSnapshot
from .repository import BookingRepository
from .schedule import ResolvedDay, ScheduleResolver, resolve_day
from .capacity import resolve_capacity, load_capacity_table
from .calculator import Slot, SlotsResult, generate_slots
from .validator import ValidationResult, validate_booking
from .calendar import AvailableDate, list_available_dates
from .redis_store import ScheduleRedisStore
from .invalidator import invalidate_schedule_cache

__all__ = [
    "SettingsSnapshot",
    "BookingRepository",
    "ResolvedDay",
    "ScheduleResolver",
    "resolve_day",
    "resolve_capacity",
    "load_capacity_table",
    "Slot",
    "SlotsResult",
    "generate_slots",
    "ValidationResult",
    "validate_booking",
    "AvailableDate",
    "list_available_dates",
    "ScheduleRedisStore",
    "invalidate_schedule_cache",
]
