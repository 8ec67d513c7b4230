# backend/clinic_booking/routers/holidays.py
# API: no PATCH, DELETE = hard

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_redis
from ..models.generated import Holidays as DBHolidays
from ..schemas.holidays import HolidayCreate, HolidayRead
from ..services.slots import invalidate_schedule_cache

router = APIRouter(prefix="/admin/holidays", tags=["admin"])


@router.get("", response_model=list[HolidayRead])
def list_holidays(
    start: date | None = None,
    end: date | None = None,
    db: Session = Depends(get_db),
):
    query = db.query(DBHolidays)
    if start:
        query = query.filter(DBHolidays.date >= start)
    if end:
        query = query.filter(DBHolidays.date <= end)
    return query.order_by(DBHolidays.date).all()


@router.post("", response_model=HolidayRead, status_code=status.HTTP_201_CREATED)
def create_holiday(
    data: HolidayCreate,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    if db.query(DBHolidays).filter(DBHolidays.date == data.date).first():
        raise HTTPException(status_code=409, detail="Holiday already exists")

    obj = DBHolidays(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)

    invalidate_schedule_cache(redis, [obj.date])
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_holiday(
    id: int,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    obj = db.get(DBHolidays, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    holiday_date = obj.date
    db.delete(obj)
    db.commit()

    invalidate_schedule_cache(redis, [holiday_date])
