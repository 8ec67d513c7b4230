# backend/clinic_booking/schemas/services.py

from typing import Optional

from .common import ApiModel


class ServiceRead(ApiModel):
    id: int
    name: str
    description: Optional[str] = None
    duration_minutes: int
    sort_order: int = 0
