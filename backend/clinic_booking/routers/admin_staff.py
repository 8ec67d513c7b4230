# backend/clinic_booking/routers/admin_staff.py
# DELETE = soft-delete (is_active); past appointments keep their staff

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import Staff as DBStaff
from ..schemas.staff import StaffCreate, StaffRead, StaffReorder, StaffUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/staff", tags=["admin"])


def _active_staff(db: Session) -> list[DBStaff]:
    return (
        db.query(DBStaff)
        .filter(DBStaff.is_active == 1)
        .order_by(DBStaff.sort_order, DBStaff.id)
        .all()
    )


@router.get("", response_model=list[StaffRead])
def list_staff(db: Session = Depends(get_db)):
    return _active_staff(db)


@router.post("", response_model=StaffRead, status_code=status.HTTP_201_CREATED)
def create_staff(data: StaffCreate, db: Session = Depends(get_db)):
    # New staff go to the end of the list
    last = db.query(func.max(DBStaff.sort_order)).scalar()
    obj = DBStaff(
        name=data.name.strip(),
        title=data.title.strip() if data.title else None,
        sort_order=(last + 1) if last is not None else 0,
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    logger.info(f"Staff {obj.id} created: {obj.name}")
    return obj


@router.put("/reorder", response_model=list[StaffRead])
def reorder_staff(data: StaffReorder, db: Session = Depends(get_db)):
    staff = {s.id: s for s in db.query(DBStaff).filter(DBStaff.id.in_(data.ids)).all()}
    missing = [i for i in data.ids if i not in staff]
    if missing:
        raise HTTPException(status_code=404, detail=f"Unknown staff: {missing}")

    for position, staff_id in enumerate(data.ids):
        staff[staff_id].sort_order = position
    db.commit()
    return _active_staff(db)


@router.patch("/{id}", response_model=StaffRead)
def update_staff(id: int, data: StaffUpdate, db: Session = Depends(get_db)):
    obj = db.get(DBStaff, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    values = data.model_dump(exclude_unset=True)
    if values.get("name") is None:
        values.pop("name", None)
    for field, value in values.items():
        setattr(obj, field, value)

    db.commit()
    db.refresh(obj)
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_staff(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBStaff, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    obj.is_active = 0
    db.commit()
    logger.info(f"Staff {id} deactivated")
