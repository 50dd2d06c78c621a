# ============================================================================
# SCOPE: APPLICATION LAYER (Scheduling)
# Description: Data Transfer Objects for availability, booking and slot
#              registration operations.
# ============================================================================
"""Scheduling DTOs.

Data Transfer Objects for availability queries, booking, reprogramming,
status transitions and recurring slot registration.
"""

from dataclasses import dataclass, field
from datetime import date, time
from typing import Any

from ...domain.value_objects.appointment_status import AppointmentEvent
from ...domain.value_objects.booking_target import AutoResolve, BookingTarget
from ...domain.value_objects.day_of_week import DayOfWeek

# =============================================================================
# Request DTOs
# =============================================================================


@dataclass(frozen=True)
class GetAvailabilityRequest:
    """
    Request DTO for the available times of one practitioner on one date.

    ``target_date`` defaults to today; ``appointment_type_id`` narrows the
    windows to the hours that type may be given.
    """

    practitioner_id: str
    target_date: date | None = None
    appointment_type_id: str | None = None


@dataclass(frozen=True)
class BookAppointmentRequest:
    """Request DTO for booking a new appointment."""

    practitioner_id: str
    patient_id: str
    appointment_date: date
    hour: time
    target: BookingTarget = field(default_factory=AutoResolve)
    custom_duration: int | None = None
    observation: str | None = None


@dataclass(frozen=True)
class ReprogramAppointmentRequest:
    """Request DTO for moving an appointment to another date and hour."""

    appointment_id: str
    new_date: date
    new_hour: time
    slot_id: str
    schedule_id: str
    observation: str | None = None


@dataclass(frozen=True)
class TransitionAppointmentRequest:
    """Request DTO for an appointment status change."""

    appointment_id: str
    event: AppointmentEvent
    reason: str | None = None


@dataclass(frozen=True)
class ScheduleWindowInput:
    """Bounds of one schedule window of a slot being registered."""

    opening_hour: time
    close_hour: time
    overtime_start_hour: time | None = None


@dataclass(frozen=True)
class RegisterSlotRequest:
    """Request DTO for registering a recurring slot."""

    practitioner_id: str
    branch_id: str
    day_of_week: DayOfWeek
    windows: tuple[ScheduleWindowInput, ...]
    duration_minutes: int | None = None
    location_id: str | None = None
    unavailable: bool = False


# =============================================================================
# Response DTOs
# =============================================================================


@dataclass
class AvailableTimeDTO:
    """One bookable time and the (slot, window) pair producing it."""

    time: str  # HH:MM format
    slot_id: str
    schedule_id: str
    is_overtime: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "time": self.time,
            "slot_id": self.slot_id,
            "schedule_id": self.schedule_id,
            "is_overtime": self.is_overtime,
        }


@dataclass
class AvailableDayDTO:
    """Available and booked times of a practitioner on one date."""

    date: str  # ISO format
    available: list[AvailableTimeDTO] = field(default_factory=list)
    booked: list[str] = field(default_factory=list)

    def find(self, hour: str) -> AvailableTimeDTO | None:
        """First available entry at ``hour`` (HH:MM), if any."""
        return next((entry for entry in self.available if entry.time == hour), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "available": [entry.to_dict() for entry in self.available],
            "booked": list(self.booked),
        }
