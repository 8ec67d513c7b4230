# backend/clinic_booking/schemas/schedule_exceptions.py

from datetime import date, datetime, time
from typing import Literal, Optional

from pydantic import model_validator

from .common import ApiModel

ExceptionType = Literal["closed", "partial_closed", "modified_hours", "special_open"]


class ScheduleExceptionCreate(ApiModel):
    exception_type: ExceptionType
    start_date: date
    end_date: date

    start_time: Optional[time] = None
    end_time: Optional[time] = None

    morning_open: Optional[time] = None
    morning_close: Optional[time] = None
    afternoon_open: Optional[time] = None
    afternoon_close: Optional[time] = None

    reason: Optional[str] = None
    notes: Optional[str] = None
    is_recurring: bool = False

    @model_validator(mode="after")
    def _check_ranges(self):
        if self.start_date > self.end_date:
            raise ValueError("end_date must be on or after start_date")
        if self.exception_type == "partial_closed":
            if self.start_time is None or self.end_time is None:
                raise ValueError("partial_closed requires start_time and end_time")
            if self.start_time >= self.end_time:
                raise ValueError("start_time must be before end_time")
        return self


class ScheduleExceptionRead(ApiModel):
    id: int

    exception_type: str
    start_date: date
    end_date: date

    start_time: Optional[time] = None
    end_time: Optional[time] = None

    morning_open: Optional[time] = None
    morning_close: Optional[time] = None
    afternoon_open: Optional[time] = None
    afternoon_close: Optional[time] = None

    reason: Optional[str] = None
    notes: Optional[str] = None
    is_recurring: bool

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
