# backend/clinic_booking/schemas/slot_capacities.py

from datetime import date, time
from typing import Literal, Optional

from pydantic import Field

from .common import ApiModel


class SlotCapacityRead(ApiModel):
    id: int
    day_of_week: Optional[int] = None
    specific_date: Optional[date] = None
    time_slot: time
    capacity: int


class SlotCapacityList(ApiModel):
    capacities: list[SlotCapacityRead]
    default_capacity: int


class DefaultCapacityUpdate(ApiModel):
    capacity: int = Field(ge=1)


class CapacityValue(ApiModel):
    """capacity=None removes the override."""
    capacity: Optional[int] = Field(default=None, ge=1)


class WeekdayCapacityItem(ApiModel):
    day_of_week: int = Field(ge=0, le=6)
    time_slot: time
    capacity: Optional[int] = Field(default=None, ge=1)


class BulkCapacityUpdate(ApiModel):
    capacities: list[WeekdayCapacityItem]


class DateCapacityItem(ApiModel):
    time_slot: time
    capacity: Optional[int] = Field(default=None, ge=1)


class DateCapacityUpdate(ApiModel):
    capacities: list[DateCapacityItem]


class EffectiveCapacity(ApiModel):
    time_slot: str
    capacity: int
    source: Literal["default", "day", "date"]


class DateCapacityView(ApiModel):
    date: date
    day_of_week: int
    capacities: list[EffectiveCapacity]
