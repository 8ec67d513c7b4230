# backend/clinic_booking/schemas/patients.py

from datetime import datetime
from typing import Optional

from pydantic import Field, field_serializer

from .appointments import AppointmentDetail
from .common import ApiModel, clinic_iso


class PatientRead(ApiModel):
    id: int
    name: str
    kana: str
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None

    appointment_count: int = 0
    last_visit: Optional[datetime] = None

    @field_serializer("last_visit", when_used="json")
    def _clinic_time(self, value: datetime | None) -> str | None:
        return clinic_iso(value)


class PatientNoteCreate(ApiModel):
    note: str = Field(max_length=2000)


class PatientNoteRead(ApiModel):
    id: int
    patient_id: int
    note: str
    created_at: Optional[datetime] = None


class PatientDetail(PatientRead):
    """Patient with booking history and notes, newest first."""
    appointments: list[AppointmentDetail] = []
    notes: list[PatientNoteRead] = []
