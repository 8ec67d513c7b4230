# backend/clinic_booking/schemas/holidays.py

from datetime import date
from typing import Optional

from .common import ApiModel


class HolidayCreate(ApiModel):
    date: date
    name: Optional[str] = None


class HolidayRead(ApiModel):
    id: int
    date: date
    name: Optional[str] = None
