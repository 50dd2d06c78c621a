"""
Scheduling SQLAlchemy Models

Database models for scheduling domain persistence.
Uses SQLAlchemy 2.0 style with Mapped[] type annotations.
"""

import uuid
from datetime import date, datetime, time

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    Time,
    func,
    literal_column,
    text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from agenda.database.base import Base, TimestampMixin

# Stand-in for a missing overtime start in the bounds index; a real overtime
# start is always strictly after the opening hour, so it is never midnight.
NO_OVERTIME_SENTINEL = "'00:00:00'::time"


# =============================================================================
# Reference tables (managed outside the scheduling engine)
# =============================================================================


class PractitionerModel(Base, TimestampMixin):
    """Practitioner reference row."""

    __tablename__ = "practitioners"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True, default=lambda: str(uuid.uuid4()))
    full_name: Mapped[str] = mapped_column(String(200), nullable=False, comment="Nombre completo")


class PatientModel(Base, TimestampMixin):
    """Patient reference row."""

    __tablename__ = "patients"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True, default=lambda: str(uuid.uuid4()))
    full_name: Mapped[str] = mapped_column(String(200), nullable=False, comment="Nombre completo")


class BranchModel(Base, TimestampMixin):
    """Branch (sede) reference row."""

    __tablename__ = "branches"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)


class LocationModel(Base, TimestampMixin):
    """Location (consultorio) inside a branch."""

    __tablename__ = "locations"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True, default=lambda: str(uuid.uuid4()))
    branch_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("branches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)


class AppointmentTypeModel(Base, TimestampMixin):
    """Appointment type (consulta, control, ...) reference row."""

    __tablename__ = "appointment_types"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)


class AppointmentTypeAvailabilityModel(Base, TimestampMixin):
    """Hours of one weekday in which an appointment type may be given."""

    __tablename__ = "appointment_type_availabilities"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True, default=lambda: str(uuid.uuid4()))
    appointment_type_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("appointment_types.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    day_of_week: Mapped[str] = mapped_column(String(9), nullable=False, comment="SUNDAY .. SATURDAY")
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)


# =============================================================================
# Scheduling tables
# =============================================================================


class ScheduleWindowModel(Base, TimestampMixin):
    """SQLAlchemy model for ScheduleWindow entity."""

    __tablename__ = "schedule_windows"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True, default=lambda: str(uuid.uuid4()))
    opening_hour: Mapped[time] = mapped_column(Time, nullable=False, comment="Hora de apertura")
    close_hour: Mapped[time] = mapped_column(Time, nullable=False, comment="Hora de cierre")
    overtime_start_hour: Mapped[time | None] = mapped_column(
        Time,
        nullable=True,
        comment="Inicio del sobreturno",
    )


Index(
    "uq_schedule_windows_bounds",
    ScheduleWindowModel.opening_hour,
    ScheduleWindowModel.close_hour,
    func.coalesce(ScheduleWindowModel.overtime_start_hour, literal_column(NO_OVERTIME_SENTINEL)),
    unique=True,
)


recurring_slot_windows = Table(
    "recurring_slot_windows",
    Base.metadata,
    Column(
        "slot_id",
        UUID(as_uuid=False),
        ForeignKey("recurring_slots.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "schedule_id",
        UUID(as_uuid=False),
        ForeignKey("schedule_windows.id", ondelete="RESTRICT"),
        primary_key=True,
    ),
)


class RecurringSlotModel(Base, TimestampMixin):
    """SQLAlchemy model for RecurringSlot entity."""

    __tablename__ = "recurring_slots"
    __table_args__ = (Index("ix_recurring_slots_practitioner_day", "practitioner_id", "day_of_week"),)

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True, default=lambda: str(uuid.uuid4()))
    practitioner_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("practitioners.id", ondelete="CASCADE"),
        nullable=False,
    )
    branch_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("branches.id", ondelete="RESTRICT"),
        nullable=False,
    )
    location_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("locations.id", ondelete="SET NULL"),
        nullable=True,
    )
    day_of_week: Mapped[str] = mapped_column(String(9), nullable=False, comment="SUNDAY .. SATURDAY")
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    unavailable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class AppointmentModel(Base, TimestampMixin):
    """SQLAlchemy model for Appointment entity."""

    __tablename__ = "appointments"
    __table_args__ = (
        # One active appointment per practitioner, date and hour
        Index(
            "uq_appointments_practitioner_date_hour",
            "practitioner_id",
            "appointment_date",
            "hour",
            unique=True,
            postgresql_where=text("status != 'cancelled'"),
            sqlite_where=text("status != 'cancelled'"),
        ),
        Index("ix_appointments_practitioner_date", "practitioner_id", "appointment_date"),
    )

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True, default=lambda: str(uuid.uuid4()))

    # References
    patient_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("patients.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    practitioner_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("practitioners.id", ondelete="RESTRICT"),
        nullable=False,
    )
    slot_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("recurring_slots.id", ondelete="RESTRICT"),
        nullable=False,
    )
    schedule_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("schedule_windows.id", ondelete="RESTRICT"),
        nullable=False,
    )

    # Scheduling
    appointment_date: Mapped[date] = mapped_column(Date, nullable=False)
    hour: Mapped[time] = mapped_column(Time, nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=30)

    # Status
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending", index=True)
    observation: Mapped[str | None] = mapped_column(Text, nullable=True)
    reprogrammed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Cancellation
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    cancellation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Bumped by the mapper on every UPDATE, which also checks the loaded value
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __mapper_args__ = {"version_id_col": version}
