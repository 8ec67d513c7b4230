# backend/clinic_booking/routers/slot_capacities.py
"""
Slot capacity overrides.

Lookup order for a time-of-day on a date:
1. row for the specific date
2. row for the weekday
3. default_slot_capacity setting

capacity=None in a PUT removes the override. Capacities are read on every
slot generation, so no schedule cache invalidation is needed.
"""

from datetime import date, datetime, time, timedelta

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import SlotCapacities as DBSlotCapacities
from ..schemas.slot_capacities import (
    BulkCapacityUpdate,
    CapacityValue,
    DateCapacityUpdate,
    DateCapacityView,
    DefaultCapacityUpdate,
    EffectiveCapacity,
    SlotCapacityList,
)
from ..services.slots import BookingRepository, load_capacity_table
from ..services.slots.config import clinic_weekday, format_time, parse_time_str
from .settings import upsert_setting

router = APIRouter(prefix="/admin/slot-capacities", tags=["admin"])

# Grid shown by the per-date editor
GRID_START = time(9, 0)
GRID_END = time(19, 0)


@router.get("", response_model=SlotCapacityList)
def list_slot_capacities(db: Session = Depends(get_db)):
    repo = BookingRepository(db)
    capacities = (
        db.query(DBSlotCapacities)
        .order_by(DBSlotCapacities.day_of_week, DBSlotCapacities.specific_date, DBSlotCapacities.time_slot)
        .all()
    )
    return SlotCapacityList(
        capacities=capacities,
        default_capacity=repo.settings_snapshot().default_slot_capacity,
    )


@router.put("/default")
def update_default_capacity(data: DefaultCapacityUpdate, db: Session = Depends(get_db)):
    upsert_setting(db, "default_slot_capacity", data.capacity)
    db.commit()
    return {"success": True}


@router.put("/bulk")
def bulk_update_capacities(data: BulkCapacityUpdate, db: Session = Depends(get_db)):
    try:
        for item in data.capacities:
            _apply_weekday_capacity(db, item.day_of_week, item.time_slot, item.capacity)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return {"success": True, "count": len(data.capacities)}


@router.get("/date/{target_date}", response_model=DateCapacityView)
def get_date_capacities(target_date: date, db: Session = Depends(get_db)):
    repo = BookingRepository(db)
    config = repo.settings_snapshot()
    weekday = clinic_weekday(target_date)
    table = load_capacity_table(repo, weekday, config, target_date)

    grid = set(_grid_times(config.slot_duration_minutes))
    grid.update(table.by_weekday)
    grid.update(table.by_date)

    capacities = []
    for time_slot in sorted(grid):
        capacity, source = table.lookup(time_slot)
        capacities.append(EffectiveCapacity(
            time_slot=format_time(time_slot),
            capacity=capacity,
            source=source,
        ))

    return DateCapacityView(date=target_date, day_of_week=weekday, capacities=capacities)


@router.put("/date/{target_date}")
def update_date_capacities(
    target_date: date,
    data: DateCapacityUpdate,
    db: Session = Depends(get_db),
):
    try:
        for item in data.capacities:
            row = (
                db.query(DBSlotCapacities)
                .filter(
                    DBSlotCapacities.specific_date == target_date,
                    DBSlotCapacities.time_slot == item.time_slot,
                )
                .first()
            )
            _apply_capacity(db, row, item.capacity, specific_date=target_date, time_slot=item.time_slot)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return {"success": True, "count": len(data.capacities)}


@router.put("/{day_of_week}/{time_slot}")
def update_weekday_capacity(
    data: CapacityValue,
    day_of_week: int = Path(ge=0, le=6),
    time_slot: str = Path(),
    db: Session = Depends(get_db),
):
    parsed = parse_time_str(time_slot)
    if parsed is None:
        raise HTTPException(status_code=400, detail="Invalid time slot")

    _apply_weekday_capacity(db, day_of_week, parsed, data.capacity)
    db.commit()
    return {"success": True}


def _apply_weekday_capacity(db: Session, day_of_week: int, time_slot: time, capacity: int | None) -> None:
    row = (
        db.query(DBSlotCapacities)
        .filter(
            DBSlotCapacities.day_of_week == day_of_week,
            DBSlotCapacities.specific_date.is_(None),
            DBSlotCapacities.time_slot == time_slot,
        )
        .first()
    )
    _apply_capacity(db, row, capacity, day_of_week=day_of_week, time_slot=time_slot)


def _apply_capacity(db: Session, row, capacity: int | None, **keys) -> None:
    if capacity is None:
        if row is not None:
            db.delete(row)
        return

    if row is None:
        db.add(DBSlotCapacities(capacity=capacity, **keys))
    else:
        row.capacity = capacity
        row.updated_at = func.now()
    db.flush()


def _grid_times(step_minutes: int) -> list[time]:
    times = []
    current = datetime.combine(date.min, GRID_START)
    end = datetime.combine(date.min, GRID_END)
    while current < end:
        times.append(current.time())
        current += timedelta(minutes=step_minutes)
    return times
