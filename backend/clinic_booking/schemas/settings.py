# backend/clinic_booking/schemas/settings.py

from datetime import time
from typing import Optional

from pydantic import Field

from .common import ApiModel


class BookingSettingsRead(ApiModel):
    cutoff_days: int
    cutoff_hours: int
    max_days_ahead: int
    slot_duration_minutes: int
    default_slot_capacity: int
    lunch_start: Optional[time] = None
    lunch_end: Optional[time] = None


class BookingSettingsUpdate(ApiModel):
    cutoff_days: Optional[int] = Field(default=None, ge=0)
    cutoff_hours: Optional[int] = Field(default=None, ge=0, le=24)
    max_days_ahead: Optional[int] = Field(default=None, ge=0)
    slot_duration_minutes: Optional[int] = Field(default=None, ge=1)
    default_slot_capacity: Optional[int] = Field(default=None, ge=1)
    lunch_start: Optional[time] = None
    lunch_end: Optional[time] = None
