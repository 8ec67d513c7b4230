# backend/clinic_booking/schemas/common.py

from datetime import datetime

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from ..config import settings
from ..services.slots.config import to_clinic_iso


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = {
        "from_attributes": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


def clinic_iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    return to_clinic_iso(value, settings.tz)


class ErrorResponse(ApiModel):
    error: str
