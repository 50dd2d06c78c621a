"""
Scheduling API Schemas

Pydantic schemas for API request/response validation.
"""

from datetime import date, datetime, time
from typing import Self
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from agenda.core.domain import ValidationException
from agenda.domains.scheduling.application.dto import (
    AvailableDayDTO,
    BookAppointmentRequest,
    RegisterSlotRequest,
    ReprogramAppointmentRequest,
    ScheduleWindowInput,
)
from agenda.domains.scheduling.domain.entities import Appointment, RecurringSlot
from agenda.domains.scheduling.domain.value_objects import (
    AppointmentEvent,
    AppointmentStatus,
    AutoResolve,
    BookingTarget,
    DayOfWeek,
    ExplicitSlot,
    format_hour,
    parse_hour,
)


def _hour(value: str | time, field: str) -> time:
    try:
        return parse_hour(value, field=field)
    except ValidationException as e:
        raise ValueError(e.message) from e


# =============================================================================
# Availability
# =============================================================================


class AvailableTimeResponse(BaseModel):
    """One bookable time."""

    time: str
    slot_id: str
    schedule_id: str
    is_overtime: bool = False


class AvailableDayResponse(BaseModel):
    """Availability response schema."""

    date: str
    available: list[AvailableTimeResponse]
    booked: list[str]

    @classmethod
    def from_dto(cls, dto: AvailableDayDTO) -> "AvailableDayResponse":
        return cls.model_validate(dto.to_dict())


# =============================================================================
# Appointments
# =============================================================================


class BookAppointmentBody(BaseModel):
    """
    Booking request schema.

    ``slot_id`` and ``schedule_id`` go together: both name the pair to book,
    neither lets the engine pick one.
    """

    practitioner_id: UUID
    patient_id: UUID
    date: date
    hour: time
    slot_id: UUID | None = None
    schedule_id: UUID | None = None
    custom_duration: int | None = Field(default=None, gt=0, le=24 * 60)
    observation: str | None = Field(default=None, max_length=1000)

    @field_validator("hour", mode="before")
    @classmethod
    def parse_hour_field(cls, v):
        return _hour(v, "hour")

    @model_validator(mode="after")
    def check_target(self) -> Self:
        if (self.slot_id is None) != (self.schedule_id is None):
            raise ValueError("slot_id and schedule_id must be given together")
        return self

    def target(self) -> BookingTarget:
        if self.slot_id is not None and self.schedule_id is not None:
            return ExplicitSlot(slot_id=str(self.slot_id), schedule_id=str(self.schedule_id))
        return AutoResolve()

    def to_request(self) -> BookAppointmentRequest:
        return BookAppointmentRequest(
            practitioner_id=str(self.practitioner_id),
            patient_id=str(self.patient_id),
            appointment_date=self.date,
            hour=self.hour,
            target=self.target(),
            custom_duration=self.custom_duration,
            observation=self.observation,
        )


class ReprogramAppointmentBody(BaseModel):
    """Reprogramming request schema."""

    date: date
    hour: time
    slot_id: UUID
    schedule_id: UUID
    observation: str | None = Field(default=None, max_length=1000)

    @field_validator("hour", mode="before")
    @classmethod
    def parse_hour_field(cls, v):
        return _hour(v, "hour")

    def to_request(self, appointment_id: UUID) -> ReprogramAppointmentRequest:
        return ReprogramAppointmentRequest(
            appointment_id=str(appointment_id),
            new_date=self.date,
            new_hour=self.hour,
            slot_id=str(self.slot_id),
            schedule_id=str(self.schedule_id),
            observation=self.observation,
        )


class TransitionAppointmentBody(BaseModel):
    """Status change request: either the event or the target status."""

    event: AppointmentEvent | None = None
    status: AppointmentStatus | None = None
    reason: str | None = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def check_one_of(self) -> Self:
        if (self.event is None) == (self.status is None):
            raise ValueError("Exactly one of event or status is required")
        if self.status is not None:
            # No event leads back to pending
            AppointmentEvent.for_target(self.status)
        return self

    def resolved_event(self) -> AppointmentEvent:
        if self.event is not None:
            return self.event
        return AppointmentEvent.for_target(self.status)


class AppointmentResponse(BaseModel):
    """Appointment response schema."""

    id: str
    patient_id: str
    practitioner_id: str
    slot_id: str
    schedule_id: str
    date: str
    hour: str
    duration_minutes: int
    status: str
    observation: str | None = None
    reprogrammed: bool = False
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None

    @classmethod
    def from_entity(cls, appointment: Appointment) -> "AppointmentResponse":
        return cls(
            id=str(appointment.id),
            patient_id=appointment.patient_id,
            practitioner_id=appointment.practitioner_id,
            slot_id=appointment.slot_id,
            schedule_id=appointment.schedule_id,
            date=appointment.appointment_date.isoformat() if appointment.appointment_date else "",
            hour=format_hour(appointment.hour) if appointment.hour else "",
            duration_minutes=appointment.duration_minutes,
            status=appointment.status.value,
            observation=appointment.observation,
            reprogrammed=appointment.reprogrammed,
            cancelled_at=appointment.cancelled_at,
            cancellation_reason=appointment.cancellation_reason,
        )


# =============================================================================
# Recurring slots
# =============================================================================


class ScheduleWindowBody(BaseModel):
    """Schedule window bounds, as HH:MM strings."""

    opening_hour: time
    close_hour: time
    overtime_start_hour: time | None = None

    @field_validator("opening_hour", "close_hour", "overtime_start_hour", mode="before")
    @classmethod
    def parse_hours(cls, v, info):
        if v is None:
            return v
        return _hour(v, info.field_name)


class RegisterSlotBody(BaseModel):
    """Recurring slot registration schema."""

    practitioner_id: UUID
    branch_id: UUID
    location_id: UUID | None = None
    day_of_week: DayOfWeek
    duration_minutes: int | None = Field(default=None, gt=0, le=24 * 60)
    unavailable: bool = False
    windows: list[ScheduleWindowBody] = Field(min_length=1)

    @field_validator("day_of_week", mode="before")
    @classmethod
    def normalize_day(cls, v):
        return v.upper() if isinstance(v, str) else v

    def to_request(self) -> RegisterSlotRequest:
        return RegisterSlotRequest(
            practitioner_id=str(self.practitioner_id),
            branch_id=str(self.branch_id),
            location_id=str(self.location_id) if self.location_id else None,
            day_of_week=self.day_of_week,
            duration_minutes=self.duration_minutes,
            unavailable=self.unavailable,
            windows=tuple(
                ScheduleWindowInput(
                    opening_hour=w.opening_hour,
                    close_hour=w.close_hour,
                    overtime_start_hour=w.overtime_start_hour,
                )
                for w in self.windows
            ),
        )


class SlotResponse(BaseModel):
    """Recurring slot response schema."""

    id: str
    practitioner_id: str
    branch_id: str
    location_id: str | None = None
    day_of_week: str
    duration_minutes: int
    unavailable: bool
    schedule_ids: list[str]
    deleted_at: datetime | None = None

    @classmethod
    def from_entity(cls, slot: RecurringSlot) -> "SlotResponse":
        return cls(
            id=str(slot.id),
            practitioner_id=slot.practitioner_id,
            branch_id=slot.branch_id,
            location_id=slot.location_id,
            day_of_week=slot.day_of_week.value,
            duration_minutes=slot.duration_minutes,
            unavailable=slot.unavailable,
            schedule_ids=list(slot.schedule_ids),
            deleted_at=slot.deleted_at,
        )
