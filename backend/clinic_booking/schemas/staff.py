# backend/clinic_booking/schemas/staff.py

from typing import Optional

from pydantic import Field

from .common import ApiModel


class StaffRead(ApiModel):
    id: int
    name: str
    title: Optional[str] = None
    sort_order: int = 0


class StaffCreate(ApiModel):
    name: str = Field(min_length=1, max_length=100)
    title: Optional[str] = Field(default=None, max_length=100)


class StaffUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    title: Optional[str] = Field(default=None, max_length=100)


class StaffReorder(ApiModel):
    """Staff ids in display order."""
    ids: list[int]
