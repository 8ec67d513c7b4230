import logging

from fastapi import Depends, FastAPI
from redis import Redis
from redis.exceptions import RedisError

from .config import settings
from .dependencies import get_redis
from .routers import (
    admin_appointments,
    admin_patients,
    admin_staff,
    appointments,
    business_hours,
    holidays,
    schedule_exceptions,
    services,
    settings as settings_router,
    slot_capacities,
    slots,
    staff,
)

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

API_PREFIX = "/api"

ROUTERS = (
    services.router,
    staff.router,
    slots.router,
    appointments.router,
    admin_appointments.router,
    admin_patients.router,
    admin_staff.router,
    business_hours.router,
    holidays.router,
    schedule_exceptions.router,
    slot_capacities.router,
    settings_router.router,
)


def create_app() -> FastAPI:
    app = FastAPI(title="Clinic Booking API")

    for router in ROUTERS:
        app.include_router(router, prefix=API_PREFIX)

    @app.get("/health")
    def health(redis: Redis | None = Depends(get_redis)):
        if redis is None:
            return {"status": "ok", "redis": None}
        try:
            return {"status": "ok", "redis": redis.ping()}
        except RedisError:
            return {"status": "ok", "redis": False}

    return app


app = create_app()
