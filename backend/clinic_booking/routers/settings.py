# backend/clinic_booking/routers/settings.py

from fastapi import APIRouter, Depends, HTTPException
from redis import Redis
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_redis
from ..models.generated import SystemSettings as DBSystemSettings
from ..schemas.settings import BookingSettingsRead, BookingSettingsUpdate
from ..services.slots import BookingRepository, SettingsSnapshot, invalidate_schedule_cache
from ..services.slots.config import format_time

router = APIRouter(prefix="/admin/settings", tags=["admin"])

# Request field → settings key
BOOKING_SETTING_KEYS = {
    "cutoff_days": "booking_cutoff_days",
    "cutoff_hours": "booking_cutoff_hours",
    "max_days_ahead": "booking_max_days_ahead",
    "slot_duration_minutes": "slot_duration_minutes",
    "default_slot_capacity": "default_slot_capacity",
    "lunch_start": "lunch_start",
    "lunch_end": "lunch_end",
}


def upsert_setting(db: Session, key: str, value) -> None:
    obj = db.get(DBSystemSettings, key)
    if obj is None:
        db.add(DBSystemSettings(key=key, value=str(value)))
    else:
        obj.value = str(value)
        obj.updated_at = func.now()
    db.flush()


def _snapshot_read(snapshot: SettingsSnapshot) -> BookingSettingsRead:
    return BookingSettingsRead(
        cutoff_days=snapshot.cutoff_days,
        cutoff_hours=snapshot.cutoff_hours,
        max_days_ahead=snapshot.max_days_ahead,
        slot_duration_minutes=snapshot.slot_duration_minutes,
        default_slot_capacity=snapshot.default_slot_capacity,
        lunch_start=snapshot.lunch_start,
        lunch_end=snapshot.lunch_end,
    )


@router.get("/booking", response_model=BookingSettingsRead)
def get_booking_settings(db: Session = Depends(get_db)):
    return _snapshot_read(BookingRepository(db).settings_snapshot())


@router.put("/booking", response_model=BookingSettingsRead)
def update_booking_settings(
    data: BookingSettingsUpdate,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    changes = data.model_dump(exclude_unset=True)

    current = BookingRepository(db).settings_snapshot()
    lunch_start = changes.get("lunch_start", current.lunch_start)
    lunch_end = changes.get("lunch_end", current.lunch_end)
    if lunch_start and lunch_end and lunch_start >= lunch_end:
        raise HTTPException(status_code=400, detail="lunch_start must be before lunch_end")

    try:
        for field, value in changes.items():
            if value is None:
                # Only the lunch break may be cleared
                if field in ("lunch_start", "lunch_end"):
                    upsert_setting(db, BOOKING_SETTING_KEYS[field], "")
                continue
            if field in ("lunch_start", "lunch_end"):
                value = format_time(value)
            upsert_setting(db, BOOKING_SETTING_KEYS[field], value)
        db.commit()
    except Exception:
        db.rollback()
        raise

    # Lunch break changes resolved days
    invalidate_schedule_cache(redis)
    return _snapshot_read(BookingRepository(db).settings_snapshot())
