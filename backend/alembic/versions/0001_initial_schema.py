"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-16 00:00:00
"""
from datetime import time

from alembic import op
import sqlalchemy as sa


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


# Sunday closed, weekdays 09:00-18:00 (split around lunch), Saturday morning only
DEFAULT_BUSINESS_HOURS = [
    (0, None, None, 1),
    (1, time(9, 0), time(18, 0), 0),
    (2, time(9, 0), time(18, 0), 0),
    (3, time(9, 0), time(18, 0), 0),
    (4, time(9, 0), time(18, 0), 0),
    (5, time(9, 0), time(18, 0), 0),
    (6, time(9, 0), time(13, 0), 0),
]

DEFAULT_SETTINGS = [
    ("booking_cutoff_days", "2", "Days before the appointment date on which booking closes"),
    ("booking_cutoff_hours", "3", "Booking closes at (24 - hours):00 on the cutoff day"),
    ("booking_max_days_ahead", "60", "Furthest bookable day from today"),
    ("slot_duration_minutes", "30", "Slot generation step in minutes"),
    ("default_slot_capacity", "1", "Simultaneous bookings per slot when no override exists"),
    ("lunch_start", "12:00", "Lunch break start for single-range weekdays"),
    ("lunch_end", "13:00", "Lunch break end for single-range weekdays"),
]


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
    ]


def upgrade():
    op.create_table(
        "services",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default=sa.text("30")),
        sa.Column("is_active", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.CheckConstraint("duration_minutes > 0"),
    )

    op.create_table(
        "staff",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("title", sa.Text()),
        sa.Column("is_active", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default=sa.text("0")),
    )

    op.create_table(
        "patients",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("kana", sa.Text(), nullable=False),
        sa.Column("phone", sa.Text(), nullable=False),
        sa.Column("email", sa.Text()),
        sa.Column("address", sa.Text()),
        *_timestamps(),
    )
    op.create_index("ix_patients_phone", "patients", ["phone"])
    op.create_index("ix_patients_email", "patients", ["email"])

    op.create_table(
        "appointments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("patient_id", sa.Integer(), sa.ForeignKey("patients.id"), nullable=False),
        sa.Column("service_id", sa.Integer(), sa.ForeignKey("services.id"), nullable=False),
        sa.Column("staff_id", sa.Integer(), sa.ForeignKey("staff.id")),
        sa.Column("start_at", sa.DateTime(), nullable=False),
        sa.Column("end_at", sa.DateTime(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False, server_default=sa.text("'confirmed'")),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
        sa.CheckConstraint("start_at < end_at"),
    )
    op.create_index("idx_appointments_status_start", "appointments", ["status", "start_at"])

    business_hours = op.create_table(
        "business_hours",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("day_of_week", sa.Integer(), nullable=False, unique=True),
        sa.Column("is_closed", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("open_time", sa.Time()),
        sa.Column("close_time", sa.Time()),
        sa.Column("morning_open", sa.Time()),
        sa.Column("morning_close", sa.Time()),
        sa.Column("afternoon_open", sa.Time()),
        sa.Column("afternoon_close", sa.Time()),
        sa.CheckConstraint("day_of_week >= 0 AND day_of_week <= 6"),
    )

    op.create_table(
        "holidays",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("date", sa.Date(), nullable=False, unique=True),
        sa.Column("name", sa.Text()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
    )

    op.create_table(
        "schedule_exceptions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("exception_type", sa.Text(), nullable=False, server_default=sa.text("'closed'")),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time()),
        sa.Column("end_time", sa.Time()),
        sa.Column("morning_open", sa.Time()),
        sa.Column("morning_close", sa.Time()),
        sa.Column("afternoon_open", sa.Time()),
        sa.Column("afternoon_close", sa.Time()),
        sa.Column("reason", sa.Text()),
        sa.Column("notes", sa.Text()),
        sa.Column("is_recurring", sa.Integer(), nullable=False, server_default=sa.text("0")),
        *_timestamps(),
    )
    op.create_index("idx_schedule_exceptions_dates", "schedule_exceptions", ["start_date", "end_date"])

    op.create_table(
        "slot_capacities",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("day_of_week", sa.Integer()),
        sa.Column("specific_date", sa.Date()),
        sa.Column("time_slot", sa.Time(), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default=sa.text("1")),
        *_timestamps(),
        sa.UniqueConstraint("day_of_week", "time_slot"),
        sa.UniqueConstraint("specific_date", "time_slot"),
        sa.CheckConstraint("capacity >= 1"),
    )

    settings = op.create_table(
        "settings",
        sa.Column("key", sa.Text(), primary_key=True),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
    )

    op.create_table(
        "booking_locks",
        sa.Column("lock_date", sa.Date(), primary_key=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("0")),
    )

    op.bulk_insert(business_hours, [
        {"day_of_week": dow, "open_time": open_time, "close_time": close_time, "is_closed": is_closed}
        for dow, open_time, close_time, is_closed in DEFAULT_BUSINESS_HOURS
    ])
    op.bulk_insert(settings, [
        {"key": key, "value": value, "description": description}
        for key, value, description in DEFAULT_SETTINGS
    ])


def downgrade():
    op.drop_table("booking_locks")
    op.drop_table("settings")
    op.drop_table("slot_capacities")
    op.drop_index("idx_schedule_exceptions_dates", table_name="schedule_exceptions")
    op.drop_table("schedule_exceptions")
    op.drop_table("holidays")
    op.drop_table("business_hours")
    op.drop_index("idx_appointments_status_start", table_name="appointments")
    op.drop_table("appointments")
    op.drop_index("ix_patients_email", table_name="patients")
    op.drop_index("ix_patients_phone", table_name="patients")
    op.drop_table("patients")
    op.drop_table("staff")
    op.drop_table("services")
