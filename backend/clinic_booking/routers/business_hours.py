# backend/clinic_booking/routers/business_hours.py
# PUT replaces the two-period hours of one weekday; every cached day is dropped

from fastapi import APIRouter, Depends, HTTPException, Path
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_redis
from ..models.generated import BusinessHours as DBBusinessHours
from ..schemas.business_hours import BusinessHoursRead, BusinessHoursUpdate
from ..services.slots import invalidate_schedule_cache

router = APIRouter(prefix="/admin/business-hours", tags=["admin"])


@router.get("", response_model=list[BusinessHoursRead])
def list_business_hours(db: Session = Depends(get_db)):
    return db.query(DBBusinessHours).order_by(DBBusinessHours.day_of_week).all()


@router.get("/{day_of_week}", response_model=BusinessHoursRead)
def get_business_hours(
    day_of_week: int = Path(ge=0, le=6),
    db: Session = Depends(get_db),
):
    obj = db.query(DBBusinessHours).filter(DBBusinessHours.day_of_week == day_of_week).first()
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.put("/{day_of_week}", response_model=BusinessHoursRead)
def update_business_hours(
    data: BusinessHoursUpdate,
    day_of_week: int = Path(ge=0, le=6),
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    for open_value, close_value in (
        (data.morning_open, data.morning_close),
        (data.afternoon_open, data.afternoon_close),
    ):
        if (open_value is None) != (close_value is None):
            raise HTTPException(status_code=400, detail="open and close must be given together")
        if open_value is not None and open_value >= close_value:
            raise HTTPException(status_code=400, detail="open must be before close")

    obj = db.query(DBBusinessHours).filter(DBBusinessHours.day_of_week == day_of_week).first()
    if not obj:
        obj = DBBusinessHours(day_of_week=day_of_week)
        db.add(obj)

    obj.is_closed = 1 if data.is_closed else 0
    if data.is_closed:
        obj.morning_open = obj.morning_close = None
        obj.afternoon_open = obj.afternoon_close = None
    else:
        obj.morning_open = data.morning_open
        obj.morning_close = data.morning_close
        obj.afternoon_open = data.afternoon_open
        obj.afternoon_close = data.afternoon_close

    db.commit()
    db.refresh(obj)

    invalidate_schedule_cache(redis)
    return obj
