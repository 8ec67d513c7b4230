# backend/clinic_booking/schemas/slots.py
"""
Pydantic schemas for slots API.
"""

from datetime import date

from pydantic import Field

from .common import ApiModel


class SlotInfo(ApiModel):
    """A single candidate window."""
    start: str = Field(description="HH:MM")
    end: str = Field(description="HH:MM")
    start_at: str = Field(description="ISO-8601 with clinic offset")
    end_at: str
    available: bool
    booking_count: int = 0
    capacity: int = 1


class SlotsDayResponse(ApiModel):
    """Slots for a service on one date. error is set when none can be offered."""
    slots: list[SlotInfo] = []
    error: str | None = None


class AvailableDateInfo(ApiModel):
    """A bookable calendar date."""
    date: date
    day_of_week: int = Field(description="0 = Sunday .. 6 = Saturday")
    has_exception: bool = False
