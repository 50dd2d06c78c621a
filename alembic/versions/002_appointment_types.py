"""Add appointment types and their weekday hours.

Revision ID: 002_appointment_types
Revises: 001_scheduling_schema
Create Date: 2026-10-18

This migration creates:
- appointment_types: reference table
- appointment_type_availabilities: per-weekday hours of a type
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002_appointment_types"
down_revision: Union[str, Sequence[str], None] = "001_scheduling_schema"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create appointment type tables."""
    op.create_table(
        "appointment_types",
        sa.Column("id", postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        "appointment_type_availabilities",
        sa.Column("id", postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column(
            "appointment_type_id",
            postgresql.UUID(as_uuid=False),
            sa.ForeignKey("appointment_types.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("day_of_week", sa.String(9), nullable=False, comment="SUNDAY .. SATURDAY"),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_appointment_type_availabilities_appointment_type_id",
        "appointment_type_availabilities",
        ["appointment_type_id"],
    )


def downgrade() -> None:
    """Drop appointment type tables."""
    op.drop_table("appointment_type_availabilities")
    op.drop_table("appointment_types")
