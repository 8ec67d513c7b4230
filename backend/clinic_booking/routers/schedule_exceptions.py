# backend/clinic_booking/routers/schedule_exceptions.py
# API: PUT = full replace, DELETE = hard

from datetime import date, datetime, time, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query, status
from redis import Redis
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_redis
from ..models.generated import Appointments as DBAppointments
from ..models.generated import ScheduleExceptions as DBScheduleExceptions
from ..schemas.appointments import AppointmentDetail
from ..schemas.schedule_exceptions import (
    ExceptionType,
    ScheduleExceptionCreate,
    ScheduleExceptionRead,
)
from ..services.slots import invalidate_schedule_cache
from ..services.slots.invalidator import get_affected_dates, get_affected_dates_from_exception
from ..services.slots.repository import CONFIRMED
from .admin_appointments import to_detail

router = APIRouter(prefix="/admin/schedule-exceptions", tags=["admin"])


@router.get("", response_model=list[ScheduleExceptionRead])
def list_schedule_exceptions(
    start: date | None = None,
    end: date | None = None,
    type: ExceptionType | None = None,
    db: Session = Depends(get_db),
):
    query = db.query(DBScheduleExceptions)
    if start:
        query = query.filter(DBScheduleExceptions.end_date >= start)
    if end:
        query = query.filter(DBScheduleExceptions.start_date <= end)
    if type:
        query = query.filter(DBScheduleExceptions.exception_type == type)
    return query.order_by(DBScheduleExceptions.start_date, DBScheduleExceptions.start_time).all()


@router.get("/affected-appointments", response_model=list[AppointmentDetail])
def list_affected_appointments(
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    start_time: time | None = Query(None, alias="startTime"),
    end_time: time | None = Query(None, alias="endTime"),
    db: Session = Depends(get_db),
):
    """Confirmed appointments an exception over this range would hit."""
    if start_date > end_date:
        raise HTTPException(status_code=400, detail="endDate must be on or after startDate")

    appointments = (
        db.query(DBAppointments)
        .filter(
            DBAppointments.status == CONFIRMED,
            DBAppointments.start_at >= datetime.combine(start_date, time.min),
            DBAppointments.start_at < datetime.combine(end_date + timedelta(days=1), time.min),
        )
        .order_by(DBAppointments.start_at)
        .all()
    )

    if start_time and end_time:
        appointments = [
            apt for apt in appointments
            if apt.start_at.time() < end_time and apt.end_at.time() > start_time
        ]
    return [to_detail(apt) for apt in appointments]


@router.get("/{id}", response_model=ScheduleExceptionRead)
def get_schedule_exception(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBScheduleExceptions, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("", response_model=ScheduleExceptionRead, status_code=status.HTTP_201_CREATED)
def create_schedule_exception(
    data: ScheduleExceptionCreate,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    values = data.model_dump()
    values["is_recurring"] = 1 if data.is_recurring else 0

    obj = DBScheduleExceptions(**values)
    db.add(obj)
    db.commit()
    db.refresh(obj)

    invalidate_schedule_cache(redis, get_affected_dates_from_exception(obj))
    return obj


@router.put("/{id}", response_model=ScheduleExceptionRead)
def update_schedule_exception(
    id: int,
    data: ScheduleExceptionCreate,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    obj = db.get(DBScheduleExceptions, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    affected = set(get_affected_dates_from_exception(obj))

    for field, value in data.model_dump().items():
        setattr(obj, field, value)
    obj.is_recurring = 1 if data.is_recurring else 0
    obj.updated_at = func.now()

    db.commit()
    db.refresh(obj)

    affected.update(get_affected_dates(obj.start_date, obj.end_date))
    invalidate_schedule_cache(redis, sorted(affected))
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_schedule_exception(
    id: int,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    obj = db.get(DBScheduleExceptions, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    affected = get_affected_dates_from_exception(obj)
    db.delete(obj)
    db.commit()

    invalidate_schedule_cache(redis, affected)
