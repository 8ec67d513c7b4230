# backend/clinic_booking/services/slots/repository.py
"""
Storage reader for the availability engine.

Point lookups only; nothing here writes. Confirmed appointments are the
only ones that count toward capacity and overlap checks.
"""

from datetime import date, datetime, time, timedelta

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models.generated import (
    Appointments,
    BusinessHours,
    Holidays,
    ScheduleExceptions,
    Services,
    SlotCapacities,
    Staff,
    SystemSettings,
)
from .config import SettingsSnapshot

CONFIRMED = "confirmed"


class BookingRepository:
    """Read access to schedule, capacity and appointment tables."""

    def __init__(self, db: Session):
        self.db = db

    # ── Settings ─────────────────────────────────────────────────────────

    def load_settings(self) -> dict[str, str]:
        return {row.key: row.value for row in self.db.query(SystemSettings).all()}

    def settings_snapshot(self) -> SettingsSnapshot:
        return SettingsSnapshot.from_mapping(self.load_settings())

    # ── Services / staff ─────────────────────────────────────────────────

    def get_active_service(self, service_id: int | None) -> Services | None:
        if service_id is None:
            return None
        return (
            self.db.query(Services)
            .filter(Services.id == service_id, Services.is_active == 1)
            .first()
        )

    def get_active_staff(self, staff_id: int | None) -> Staff | None:
        if staff_id is None:
            return None
        return (
            self.db.query(Staff)
            .filter(Staff.id == staff_id, Staff.is_active == 1)
            .first()
        )

    # ── Schedule ─────────────────────────────────────────────────────────

    def get_holiday(self, target_date: date) -> Holidays | None:
        return self.db.query(Holidays).filter(Holidays.date == target_date).first()

    def list_holidays(self, start: date, end: date) -> list[Holidays]:
        return (
            self.db.query(Holidays)
            .filter(Holidays.date >= start, Holidays.date <= end)
            .all()
        )

    def get_business_hours(self, weekday: int) -> BusinessHours | None:
        return (
            self.db.query(BusinessHours)
            .filter(BusinessHours.day_of_week == weekday)
            .first()
        )

    def list_business_hours(self) -> dict[int, BusinessHours]:
        return {row.day_of_week: row for row in self.db.query(BusinessHours).all()}

    def list_exceptions(self, start: date, end: date | None = None) -> list[ScheduleExceptions]:
        """Exceptions overlapping [start, end] (a single date when end is omitted)."""
        end = end or start
        return (
            self.db.query(ScheduleExceptions)
            .filter(
                ScheduleExceptions.start_date <= end,
                ScheduleExceptions.end_date >= start,
            )
            .order_by(ScheduleExceptions.id)
            .all()
        )

    # ── Capacity ─────────────────────────────────────────────────────────

    def list_weekday_capacities(self, weekday: int) -> list[SlotCapacities]:
        return (
            self.db.query(SlotCapacities)
            .filter(
                SlotCapacities.day_of_week == weekday,
                SlotCapacities.specific_date.is_(None),
            )
            .all()
        )

    def list_date_capacities(self, target_date: date) -> list[SlotCapacities]:
        return (
            self.db.query(SlotCapacities)
            .filter(SlotCapacities.specific_date == target_date)
            .all()
        )

    def get_capacity_row(
        self,
        time_of_day: time,
        weekday: int | None = None,
        specific_date: date | None = None,
    ) -> SlotCapacities | None:
        query = self.db.query(SlotCapacities).filter(SlotCapacities.time_slot == time_of_day)
        if specific_date is not None:
            query = query.filter(SlotCapacities.specific_date == specific_date)
        else:
            query = query.filter(
                SlotCapacities.day_of_week == weekday,
                SlotCapacities.specific_date.is_(None),
            )
        return query.first()

    # ── Appointments ─────────────────────────────────────────────────────

    def list_confirmed_overlapping(
        self,
        start_at: datetime,
        end_at: datetime,
        staff_id: int | None = None,
    ) -> list[Appointments]:
        """
        Confirmed appointments with existing.start < end AND existing.end > start.

        With staff_id, only that staff's appointments and unstaffed ones
        (an unstaffed appointment may consume any staff member's time).
        """
        query = self.db.query(Appointments).filter(
            Appointments.status == CONFIRMED,
            Appointments.start_at < end_at,
            Appointments.end_at > start_at,
        )
        if staff_id is not None:
            query = query.filter(
                or_(Appointments.staff_id == staff_id, Appointments.staff_id.is_(None))
            )
        return query.all()

    def list_confirmed_on_day(
        self,
        target_date: date,
        staff_id: int | None = None,
    ) -> list[Appointments]:
        day_start = datetime.combine(target_date, time.min)
        return self.list_confirmed_overlapping(
            day_start, day_start + timedelta(days=1), staff_id
        )
