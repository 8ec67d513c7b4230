from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Text,
    Time,
    UniqueConstraint,
    text,
)

from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class Services(Base):
    __tablename__ = 'services'
    __table_args__ = (
        CheckConstraint('duration_minutes > 0'),
    )

    name = Column(Text, nullable=False)
    duration_minutes = Column(Integer, nullable=False, server_default=text('30'))
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    sort_order = Column(Integer, nullable=False, server_default=text('0'))
    id = Column(Integer, primary_key=True)
    description = Column(Text)

    appointments = relationship('Appointments', back_populates='service')


class Staff(Base):
    __tablename__ = 'staff'

    name = Column(Text, nullable=False)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    sort_order = Column(Integer, nullable=False, server_default=text('0'))
    id = Column(Integer, primary_key=True)
    title = Column(Text)

    appointments = relationship('Appointments', back_populates='staff')


class Patients(Base):
    __tablename__ = 'patients'

    name = Column(Text, nullable=False)
    kana = Column(Text, nullable=False)
    phone = Column(Text, nullable=False, index=True)
    id = Column(Integer, primary_key=True)
    email = Column(Text, index=True)
    address = Column(Text)
    created_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))

    appointments = relationship('Appointments', back_populates='patient')
    notes = relationship('PatientNotes', back_populates='patient', cascade='all, delete-orphan')


class PatientNotes(Base):
    __tablename__ = 'patient_notes'

    patient_id = Column(ForeignKey('patients.id', ondelete='CASCADE'), nullable=False, index=True)
    note = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)
    created_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))

    patient = relationship('Patients', back_populates='notes')


class Appointments(Base):
    __tablename__ = 'appointments'
    __table_args__ = (
        CheckConstraint('start_at < end_at'),
        Index('idx_appointments_status_start', 'status', 'start_at'),
    )

    patient_id = Column(ForeignKey('patients.id'), nullable=False)
    service_id = Column(ForeignKey('services.id'), nullable=False)
    staff_id = Column(ForeignKey('staff.id'))  # NULL = no preference
    # Naive wall-clock time in the clinic timezone
    start_at = Column(DateTime, nullable=False)
    end_at = Column(DateTime, nullable=False)
    status = Column(Text, nullable=False, server_default=text("'confirmed'"))
    id = Column(Integer, primary_key=True)
    notes = Column(Text)
    created_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))

    patient = relationship('Patients', back_populates='appointments')
    service = relationship('Services', back_populates='appointments')
    staff = relationship('Staff', back_populates='appointments')


class BusinessHours(Base):
    __tablename__ = 'business_hours'
    __table_args__ = (
        CheckConstraint('day_of_week >= 0 AND day_of_week <= 6'),
    )

    day_of_week = Column(Integer, nullable=False, unique=True)  # 0 = Sunday
    is_closed = Column(Integer, nullable=False, server_default=text('0'))
    id = Column(Integer, primary_key=True)
    # Legacy single pair
    open_time = Column(Time)
    close_time = Column(Time)
    morning_open = Column(Time)
    morning_close = Column(Time)
    afternoon_open = Column(Time)
    afternoon_close = Column(Time)


class Holidays(Base):
    __tablename__ = 'holidays'

    date = Column(Date, nullable=False, unique=True)
    id = Column(Integer, primary_key=True)
    name = Column(Text)
    created_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))


class ScheduleExceptions(Base):
    __tablename__ = 'schedule_exceptions'
    __table_args__ = (
        Index('idx_schedule_exceptions_dates', 'start_date', 'end_date'),
    )

    exception_type = Column(Text, nullable=False, server_default=text("'closed'"))
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_recurring = Column(Integer, nullable=False, server_default=text('0'))
    id = Column(Integer, primary_key=True)
    # partial_closed range
    start_time = Column(Time)
    end_time = Column(Time)
    # modified_hours / special_open pairs
    morning_open = Column(Time)
    morning_close = Column(Time)
    afternoon_open = Column(Time)
    afternoon_close = Column(Time)
    reason = Column(Text)
    notes = Column(Text)
    created_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))


class SlotCapacities(Base):
    __tablename__ = 'slot_capacities'
    __table_args__ = (
        UniqueConstraint('day_of_week', 'time_slot'),
        UniqueConstraint('specific_date', 'time_slot'),
        CheckConstraint('capacity >= 1'),
    )

    time_slot = Column(Time, nullable=False)
    capacity = Column(Integer, nullable=False, server_default=text('1'))
    id = Column(Integer, primary_key=True)
    day_of_week = Column(Integer)  # NULL for specific-date rows
    specific_date = Column(Date)
    created_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))


class SystemSettings(Base):
    __tablename__ = 'settings'

    key = Column(Text, primary_key=True)
    value = Column(Text, nullable=False)
    description = Column(Text)
    updated_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))


class BookingLocks(Base):
    __tablename__ = 'booking_locks'

    lock_date = Column(Date, primary_key=True)
    version = Column(Integer, nullable=False, server_default=text('0'))
