# backend/clinic_booking/routers/admin_patients.py
"""
Patient records for the admin screen.

GET  /admin/patients             - Search by name, kana, phone or email (newest 100)
GET  /admin/patients/{id}        - Record with booking history and notes
POST /admin/patients/{id}/notes  - Add a note
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import Appointments as DBAppointments
from ..models.generated import PatientNotes as DBPatientNotes
from ..models.generated import Patients as DBPatients
from ..schemas.patients import PatientDetail, PatientNoteCreate, PatientNoteRead, PatientRead
from .admin_appointments import to_detail

router = APIRouter(prefix="/admin/patients", tags=["admin"])

SEARCH_LIMIT = 100


def _visit_stats(db: Session):
    return (
        db.query(
            DBAppointments.patient_id.label("patient_id"),
            func.count(DBAppointments.id).label("appointment_count"),
            func.max(DBAppointments.start_at).label("last_visit"),
        )
        .group_by(DBAppointments.patient_id)
        .subquery()
    )


def _to_read(patient: DBPatients, appointment_count, last_visit) -> PatientRead:
    read = PatientRead.model_validate(patient)
    read.appointment_count = appointment_count or 0
    read.last_visit = last_visit
    return read


@router.get("", response_model=list[PatientRead])
def list_patients(search: str | None = None, db: Session = Depends(get_db)):
    stats = _visit_stats(db)
    query = (
        db.query(DBPatients, stats.c.appointment_count, stats.c.last_visit)
        .outerjoin(stats, stats.c.patient_id == DBPatients.id)
    )
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(
            DBPatients.name.like(pattern),
            DBPatients.kana.like(pattern),
            DBPatients.phone.like(pattern),
            DBPatients.email.like(pattern),
        ))

    rows = (
        query.order_by(DBPatients.created_at.desc(), DBPatients.id.desc())
        .limit(SEARCH_LIMIT)
        .all()
    )
    return [_to_read(patient, count, last_visit) for patient, count, last_visit in rows]


@router.get("/{id}", response_model=PatientDetail)
def get_patient(id: int, db: Session = Depends(get_db)):
    patient = db.get(DBPatients, id)
    if not patient:
        raise HTTPException(status_code=404, detail="Not found")

    appointments = (
        db.query(DBAppointments)
        .filter(DBAppointments.patient_id == id)
        .order_by(DBAppointments.start_at.desc())
        .all()
    )
    notes = (
        db.query(DBPatientNotes)
        .filter(DBPatientNotes.patient_id == id)
        .order_by(DBPatientNotes.created_at.desc(), DBPatientNotes.id.desc())
        .all()
    )

    read = _to_read(
        patient,
        len(appointments),
        appointments[0].start_at if appointments else None,
    )
    return PatientDetail(
        **read.model_dump(),
        appointments=[to_detail(apt) for apt in appointments],
        notes=[PatientNoteRead.model_validate(n) for n in notes],
    )


@router.post("/{id}/notes", response_model=PatientNoteRead, status_code=status.HTTP_201_CREATED)
def add_patient_note(id: int, data: PatientNoteCreate, db: Session = Depends(get_db)):
    patient = db.get(DBPatients, id)
    if not patient:
        raise HTTPException(status_code=404, detail="Not found")

    note = data.note.strip()
    if not note:
        raise HTTPException(status_code=400, detail="Note is empty")

    obj = DBPatientNotes(patient_id=id, note=note)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj
