"""Shared fixtures: in-memory database, fixed clock, fake Redis."""

import fnmatch
import os
from datetime import date, datetime, time

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clinic_booking.database import enable_sqlite_fk, get_db
from clinic_booking.dependencies import get_now, get_redis
from clinic_booking.main import create_app
from clinic_booking.models import Base
from clinic_booking.models.generated import (
    Appointments,
    BusinessHours,
    Holidays,
    Patients,
    ScheduleExceptions,
    Services,
    SlotCapacities,
    Staff,
    SystemSettings,
)
from clinic_booking.services.slots import BookingRepository

# Monday two weeks before the Monday used by most tests
NOW = datetime(2026, 2, 23, 8, 0)
MONDAY = date(2026, 3, 9)
SUNDAY = date(2026, 3, 8)


class FakeRedis:
    """Dict-backed subset of the redis client used by the schedule cache."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    def ping(self):
        return True

    def get(self, key):
        return self.store.get(key)

    def set(self, key, value, ex=None):
        self.store[key] = value
        if ex is not None:
            self.ttls[key] = ex
        return True

    def mget(self, keys):
        return [self.store.get(k) for k in keys]

    def delete(self, *keys):
        deleted = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                deleted += 1
            self.ttls.pop(key, None)
        return deleted

    def scan_iter(self, match="*"):
        return [k for k in list(self.store) if fnmatch.fnmatch(k, match)]

    def pipeline(self):
        return FakePipeline(self)


class FakePipeline:
    def __init__(self, redis: FakeRedis):
        self.redis = redis
        self.commands = []

    def set(self, key, value, ex=None):
        self.commands.append((key, value, ex))
        return self

    def execute(self):
        results = [self.redis.set(k, v, ex=ex) for k, v, ex in self.commands]
        self.commands = []
        return results


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", enable_sqlite_fk)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def repo(db):
    return BookingRepository(db)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def client(db):
    """Create test client on the in-memory database with the clock fixed at NOW."""
    app = create_app()

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = lambda: NOW
    app.dependency_overrides[get_redis] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()


# ── Seed helpers ─────────────────────────────────────────────────────────


def add_service(db, name="Check-up", duration=30, is_active=1) -> Services:
    obj = Services(name=name, duration_minutes=duration, is_active=is_active)
    db.add(obj)
    db.commit()
    return obj


def add_staff(db, name="Dr. Sato", is_active=1) -> Staff:
    obj = Staff(name=name, is_active=is_active)
    db.add(obj)
    db.commit()
    return obj


def seed_week(db) -> None:
    """Sunday closed; Mon-Fri 09:00-12:00 / 13:00-18:00; Saturday 09:00-13:00."""
    db.add(BusinessHours(day_of_week=0, is_closed=1))
    for dow in range(1, 6):
        db.add(BusinessHours(
            day_of_week=dow,
            is_closed=0,
            morning_open=time(9, 0),
            morning_close=time(12, 0),
            afternoon_open=time(13, 0),
            afternoon_close=time(18, 0),
        ))
    db.add(BusinessHours(
        day_of_week=6,
        is_closed=0,
        morning_open=time(9, 0),
        morning_close=time(13, 0),
    ))
    db.commit()


def set_settings(db, **values) -> None:
    for key, value in values.items():
        row = db.get(SystemSettings, key)
        if row is None:
            db.add(SystemSettings(key=key, value=str(value)))
        else:
            row.value = str(value)
    db.commit()


def add_patient(db, name="Yamada Taro", phone="09012345678") -> Patients:
    obj = Patients(name=name, kana="ヤマダ タロウ", phone=phone)
    db.add(obj)
    db.commit()
    return obj


def add_appointment(db, service, start_at, end_at, staff_id=None, status="confirmed", patient=None):
    patient = patient or add_patient(db)
    obj = Appointments(
        patient_id=patient.id,
        service_id=service.id,
        staff_id=staff_id,
        start_at=start_at,
        end_at=end_at,
        status=status,
    )
    db.add(obj)
    db.commit()
    return obj


def add_holiday(db, day, name="National holiday") -> Holidays:
    obj = Holidays(date=day, name=name)
    db.add(obj)
    db.commit()
    return obj


def add_exception(db, exception_type, start_date, end_date=None, **fields) -> ScheduleExceptions:
    obj = ScheduleExceptions(
        exception_type=exception_type,
        start_date=start_date,
        end_date=end_date or start_date,
        **fields,
    )
    db.add(obj)
    db.commit()
    return obj


def add_capacity(db, capacity, time_slot, day_of_week=None, specific_date=None) -> SlotCapacities:
    obj = SlotCapacities(
        capacity=capacity,
        time_slot=time_slot,
        day_of_week=day_of_week,
        specific_date=specific_date,
    )
    db.add(obj)
    db.commit()
    return obj
