# backend/clinic_booking/schemas/appointments.py

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field, field_serializer

from .common import ApiModel, clinic_iso

AppointmentStatus = Literal["confirmed", "cancelled", "completed"]


class AppointmentCreate(ApiModel):
    service_id: int
    staff_id: Optional[int] = None
    start_at: str
    end_at: str

    name: str = Field(min_length=1, max_length=100)
    kana: str = Field(min_length=1, max_length=100)
    phone: str = Field(min_length=1, max_length=20)
    email: Optional[str] = Field(default=None, max_length=254)
    address: Optional[str] = Field(default=None, max_length=500)
    notes: Optional[str] = Field(default=None, max_length=1000)


class AdminAppointmentCreate(ApiModel):
    """Phone booking; endAt defaults to startAt + service duration."""
    service_id: int
    staff_id: Optional[int] = None
    start_at: str
    end_at: Optional[str] = None

    name: str = Field(min_length=1, max_length=100)
    kana: str = Field(default="", max_length=100)
    phone: str = Field(default="", max_length=20)
    email: Optional[str] = Field(default=None, max_length=254)
    notes: Optional[str] = Field(default=None, max_length=1000)


class AppointmentUpdate(ApiModel):
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None


class PatientSummary(ApiModel):
    id: int
    name: str
    kana: str
    phone: str
    email: Optional[str] = None


class AppointmentRead(ApiModel):
    id: int
    patient_id: int
    service_id: int
    staff_id: Optional[int] = None

    start_at: datetime
    end_at: datetime

    status: str
    notes: Optional[str] = None

    created_at: Optional[datetime] = None

    @field_serializer("start_at", "end_at", when_used="json")
    def _clinic_time(self, value: datetime) -> str:
        return clinic_iso(value)


class AppointmentDetail(AppointmentRead):
    """Admin view with joined names."""
    service_name: Optional[str] = None
    staff_name: Optional[str] = None
    patient: Optional[PatientSummary] = None
