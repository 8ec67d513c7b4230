# backend/clinic_booking/dependencies.py
"""
FastAPI dependencies shared by routers.

Overridden in tests (fixed clock, fake Redis).
"""

from datetime import datetime

from fastapi import Depends
from redis import Redis

from .config import settings
from .redis_client import redis_client
from .services.slots import ScheduleRedisStore
from .services.slots.config import clinic_now


def get_redis() -> Redis | None:
    return redis_client


def get_schedule_cache(redis: Redis | None = Depends(get_redis)) -> ScheduleRedisStore | None:
    if redis is None:
        return None
    return ScheduleRedisStore(redis)


def get_now() -> datetime:
    """Current naive wall-clock time in the clinic timezone."""
    return clinic_now(settings.tz)
