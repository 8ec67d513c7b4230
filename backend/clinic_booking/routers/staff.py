# backend/clinic_booking/routers/staff.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import Staff as DBStaff
from ..schemas.staff import StaffRead

router = APIRouter(prefix="/staff", tags=["staff"])


@router.get("", response_model=list[StaffRead])
def list_staff(db: Session = Depends(get_db)):
    return (
        db.query(DBStaff)
        .filter(DBStaff.is_active == 1)
        .order_by(DBStaff.sort_order, DBStaff.id)
        .all()
    )
