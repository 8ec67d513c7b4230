# backend/clinic_booking/routers/slots.py
"""
Slots API endpoints.

GET /slots           - Slots for a service on one date
GET /available-dates - Bookable dates for the date picker
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..dependencies import get_now, get_schedule_cache
from ..schemas.slots import AvailableDateInfo, SlotInfo, SlotsDayResponse
from ..services.slots import (
    BookingRepository,
    ScheduleRedisStore,
    generate_slots,
    list_available_dates,
)
from ..services.slots.config import parse_id, to_clinic_iso
from ..services.slots.errors import INVALID_SERVICE, INVALID_STAFF

router = APIRouter(tags=["slots"])


def _slots_error(error: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": error, "slots": []})


@router.get("/slots", response_model=SlotsDayResponse)
def get_slots(
    target_date: str | None = Query(None, alias="date"),
    service_id: str | None = Query(None, alias="serviceId"),
    staff_id: str | None = Query(None, alias="staffId"),
    db: Session = Depends(get_db),
    cache: ScheduleRedisStore | None = Depends(get_schedule_cache),
    now: datetime = Depends(get_now),
):
    """Slots for a service on a date; 400 with an empty list when none can be offered."""
    # Malformed ids get the same 400 shape as every other slots error
    parsed_service = parse_id(service_id)
    if service_id and parsed_service is None:
        return _slots_error(INVALID_SERVICE)
    parsed_staff = parse_id(staff_id)
    if staff_id and parsed_staff is None:
        return _slots_error(INVALID_STAFF)

    repo = BookingRepository(db)
    result = generate_slots(
        repo, target_date, parsed_service, parsed_staff,
        config=repo.settings_snapshot(), now=now, cache=cache,
    )

    if result.error:
        return _slots_error(result.error)

    tz = settings.tz
    slots = [
        SlotInfo(
            start=slot.display_start,
            end=slot.display_end,
            start_at=to_clinic_iso(slot.start_at, tz),
            end_at=to_clinic_iso(slot.end_at, tz),
            available=slot.available,
            booking_count=slot.booking_count,
            capacity=slot.capacity,
        )
        for slot in result.slots
    ]
    return SlotsDayResponse(slots=slots)


@router.get("/available-dates", response_model=list[AvailableDateInfo])
def get_available_dates(
    db: Session = Depends(get_db),
    cache: ScheduleRedisStore | None = Depends(get_schedule_cache),
    now: datetime = Depends(get_now),
):
    repo = BookingRepository(db)
    dates = list_available_dates(repo, config=repo.settings_snapshot(), now=now, cache=cache)
    return [
        AvailableDateInfo(date=d.date, day_of_week=d.weekday, has_exception=d.has_exception)
        for d in dates
    ]
