# backend/clinic_booking/schemas/business_hours.py

from datetime import time
from typing import Optional

from .common import ApiModel


class BusinessHoursUpdate(ApiModel):
    is_closed: bool = False
    morning_open: Optional[time] = None
    morning_close: Optional[time] = None
    afternoon_open: Optional[time] = None
    afternoon_close: Optional[time] = None


class BusinessHoursRead(ApiModel):
    id: int
    day_of_week: int
    is_closed: bool

    open_time: Optional[time] = None
    close_time: Optional[time] = None

    morning_open: Optional[time] = None
    morning_close: Optional[time] = None
    afternoon_open: Optional[time] = None
    afternoon_close: Optional[time] = None
