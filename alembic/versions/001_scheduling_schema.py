"""Create scheduling schema.

Revision ID: 001_scheduling_schema
Revises:
Create Date: 2026-10-18

This migration creates:
- practitioners, patients, branches, locations: reference tables
- schedule_windows: shared opening/close/overtime triples (unique)
- recurring_slots: weekly availability per practitioner and weekday
- recurring_slot_windows: slot <-> window association
- appointments: bookings, one active per practitioner, date and hour
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_scheduling_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _uuid() -> postgresql.UUID:
    return postgresql.UUID(as_uuid=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create scheduling tables."""
    op.create_table(
        "practitioners",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("full_name", sa.String(200), nullable=False, comment="Nombre completo"),
        *_timestamps(),
    )
    op.create_table(
        "patients",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("full_name", sa.String(200), nullable=False, comment="Nombre completo"),
        *_timestamps(),
    )
    op.create_table(
        "branches",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        "locations",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("branch_id", _uuid(), sa.ForeignKey("branches.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_locations_branch_id", "locations", ["branch_id"])

    op.create_table(
        "schedule_windows",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("opening_hour", sa.Time(), nullable=False, comment="Hora de apertura"),
        sa.Column("close_hour", sa.Time(), nullable=False, comment="Hora de cierre"),
        sa.Column("overtime_start_hour", sa.Time(), nullable=True, comment="Inicio del sobreturno"),
        *_timestamps(),
    )
    op.execute(
        "CREATE UNIQUE INDEX uq_schedule_windows_bounds ON schedule_windows "
        "(opening_hour, close_hour, COALESCE(overtime_start_hour, '00:00:00'::time))"
    )

    op.create_table(
        "recurring_slots",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column(
            "practitioner_id", _uuid(), sa.ForeignKey("practitioners.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("branch_id", _uuid(), sa.ForeignKey("branches.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("location_id", _uuid(), sa.ForeignKey("locations.id", ondelete="SET NULL"), nullable=True),
        sa.Column("day_of_week", sa.String(9), nullable=False, comment="SUNDAY .. SATURDAY"),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("unavailable", sa.Boolean(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_recurring_slots_practitioner_day", "recurring_slots", ["practitioner_id", "day_of_week"])

    op.create_table(
        "recurring_slot_windows",
        sa.Column(
            "slot_id", _uuid(), sa.ForeignKey("recurring_slots.id", ondelete="CASCADE"), primary_key=True
        ),
        sa.Column(
            "schedule_id", _uuid(), sa.ForeignKey("schedule_windows.id", ondelete="RESTRICT"), primary_key=True
        ),
    )

    op.create_table(
        "appointments",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("patient_id", _uuid(), sa.ForeignKey("patients.id", ondelete="RESTRICT"), nullable=False),
        sa.Column(
            "practitioner_id", _uuid(), sa.ForeignKey("practitioners.id", ondelete="RESTRICT"), nullable=False
        ),
        sa.Column("slot_id", _uuid(), sa.ForeignKey("recurring_slots.id", ondelete="RESTRICT"), nullable=False),
        sa.Column(
            "schedule_id", _uuid(), sa.ForeignKey("schedule_windows.id", ondelete="RESTRICT"), nullable=False
        ),
        sa.Column("appointment_date", sa.Date(), nullable=False),
        sa.Column("hour", sa.Time(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("observation", sa.Text(), nullable=True),
        sa.Column("reprogrammed", sa.Boolean(), nullable=False),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancellation_reason", sa.Text(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_appointments_patient_id", "appointments", ["patient_id"])
    op.create_index("ix_appointments_status", "appointments", ["status"])
    op.create_index("ix_appointments_practitioner_date", "appointments", ["practitioner_id", "appointment_date"])
    op.create_index(
        "uq_appointments_practitioner_date_hour",
        "appointments",
        ["practitioner_id", "appointment_date", "hour"],
        unique=True,
        postgresql_where=sa.text("status != 'cancelled'"),
    )


def downgrade() -> None:
    """Drop scheduling tables."""
    op.drop_table("appointments")
    op.drop_table("recurring_slot_windows")
    op.drop_table("recurring_slots")
    op.execute("DROP INDEX IF EXISTS uq_schedule_windows_bounds")
    op.drop_table("schedule_windows")
    op.drop_table("locations")
    op.drop_table("branches")
    op.drop_table("patients")
    op.drop_table("practitioners")
