"""patient notes

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-16 00:00:00
"""
from alembic import op
import sqlalchemy as sa


revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "patient_notes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("patient_id", sa.Integer(), sa.ForeignKey("patients.id", ondelete="CASCADE"), nullable=False),
        sa.Column("note", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index("ix_patient_notes_patient_id", "patient_notes", ["patient_id"])


def downgrade():
    op.drop_index("ix_patient_notes_patient_id", table_name="patient_notes")
    op.drop_table("patient_notes")
