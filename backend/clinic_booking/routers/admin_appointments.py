# backend/clinic_booking/routers/admin_appointments.py
# Admin auth is enforced by the gateway in front of /api/admin

from datetime import date, datetime, time, timedelta

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_now, get_schedule_cache
from ..models.generated import Appointments as DBAppointments
from ..schemas.appointments import AdminAppointmentCreate, AppointmentDetail, AppointmentUpdate
from ..schemas.common import ErrorResponse
from ..services.appointments import (
    PatientData,
    create_appointment,
    delete_appointment,
    update_appointment,
)
from ..services.slots import ScheduleRedisStore

router = APIRouter(prefix="/admin/appointments", tags=["admin"])


def to_detail(obj: DBAppointments) -> AppointmentDetail:
    detail = AppointmentDetail.model_validate(obj)
    detail.service_name = obj.service.name if obj.service else None
    detail.staff_name = obj.staff.name if obj.staff else None
    return detail


@router.get("", response_model=list[AppointmentDetail])
def list_appointments(
    start: date | None = None,
    end: date | None = None,
    status: str | None = None,
    db: Session = Depends(get_db),
):
    query = db.query(DBAppointments)
    if start:
        query = query.filter(DBAppointments.start_at >= datetime.combine(start, time.min))
    if end:
        query = query.filter(DBAppointments.start_at < datetime.combine(end + timedelta(days=1), time.min))
    if status:
        query = query.filter(DBAppointments.status == status)
    return [to_detail(obj) for obj in query.order_by(DBAppointments.start_at).all()]


@router.post(
    "",
    response_model=AppointmentDetail,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
def create_phone_appointment(
    data: AdminAppointmentCreate,
    db: Session = Depends(get_db),
    cache: ScheduleRedisStore | None = Depends(get_schedule_cache),
    now: datetime = Depends(get_now),
):
    """
    Phone booking by staff.

    Same lock, hours and capacity checks as online booking; cutoff and
    horizon do not apply.
    """
    patient = PatientData(
        name=data.name.strip(),
        kana=data.kana.strip(),
        phone=data.phone.strip(),
        email=data.email.strip() if data.email else None,
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
        check_window=False,
    )

    if not outcome.ok:
        return JSONResponse(status_code=400, content={"error": outcome.validation.error})
    return to_detail(outcome.appointment)


@router.get("/{id}", response_model=AppointmentDetail)
def get_appointment(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBAppointments, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return to_detail(obj)


@router.patch("/{id}", response_model=AppointmentDetail, responses={400: {"model": ErrorResponse}})
def patch_appointment(
    id: int,
    data: AppointmentUpdate,
    db: Session = Depends(get_db),
):
    obj = db.get(DBAppointments, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    result = update_appointment(db, obj, status=data.status, notes=data.notes)
    if not result.valid:
        return JSONResponse(status_code=400, content={"error": result.error})
    return to_detail(obj)


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_appointment(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBAppointments, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    delete_appointment(db, obj)
