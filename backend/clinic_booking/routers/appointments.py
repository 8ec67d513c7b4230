# backend/clinic_booking/routers/appointments.py

from datetime import datetime

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_now, get_schedule_cache
from ..schemas.appointments import AppointmentCreate, AppointmentRead
from ..schemas.common import ErrorResponse
from ..services.appointments import PatientData, create_appointment
from ..services.slots import ScheduleRedisStore

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.post(
    "",
    response_model=AppointmentRead,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
def book_appointment(
    data: AppointmentCreate,
    db: Session = Depends(get_db),
    cache: ScheduleRedisStore | None = Depends(get_schedule_cache),
    now: datetime = Depends(get_now),
):
    patient = PatientData(
        name=data.name.strip(),
        kana=data.kana.strip(),
        phone=data.phone.strip(),
        email=data.email.strip() if data.email else None,
        address=data.address.strip() if data.address else None,
    )

    outcome = create_appointment(
        db,
        patient,
        service_id=data.service_id,
        staff_id=data.staff_id,
        start_at=data.start_at,
        end_at=data.end_at,
        notes=data.notes,
        now=now,
        cache=cache,
    )

    if not outcome.ok:
        return JSONResponse(status_code=400, content={"error": outcome.validation.error})
    return outcome.appointment
