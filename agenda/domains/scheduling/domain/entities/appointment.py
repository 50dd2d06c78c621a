"""
Appointment Entity for Scheduling Domain

A concrete booking of a patient with a practitioner at a date and hour,
produced by one (recurring slot, schedule window) pair.
"""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time

from agenda.core.domain import AggregateRoot

from ..value_objects.appointment_status import AppointmentEvent, AppointmentStatus


@dataclass(eq=False)
class Appointment(AggregateRoot[str]):
    """
    Appointment aggregate root.

    Status changes go through the transition table; reprogramming keeps the
    practitioner and moves date, hour, slot and window together.

    Example:
        ```python
        appointment = Appointment(
            patient_id=patient_id,
            practitioner_id=practitioner_id,
            slot_id=slot.id,
            schedule_id=window.id,
            appointment_date=date(2099, 1, 5),
            hour=time(9, 30),
        )
        appointment.approve()
        appointment.complete()
        ```
    """

    # References
    patient_id: str = ""
    practitioner_id: str = ""
    slot_id: str = ""
    schedule_id: str = ""

    # Scheduling
    appointment_date: date | None = None
    hour: time | None = None
    duration_minutes: int = 30

    # Status
    status: AppointmentStatus = AppointmentStatus.PENDING
    observation: str | None = None
    reprogrammed: bool = False

    # Cancellation
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None

    @property
    def is_active(self) -> bool:
        """Active appointments occupy their (practitioner, date, hour)."""
        return self.status.is_active()

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal()

    def starts_at(self) -> datetime | None:
        """Naive wall-clock start, in the configured timezone."""
        if self.appointment_date and self.hour:
            return datetime.combine(self.appointment_date, self.hour)
        return None

    # Status Transitions

    def apply(self, event: AppointmentEvent, reason: str | None = None) -> AppointmentStatus:
        """
        Apply a lifecycle event.

        Raises:
            InvalidTransitionException: If the event is not allowed from the
                current status
        """
        self.status = self.status.apply(event)
        if self.status is AppointmentStatus.CANCELLED:
            self.cancelled_at = datetime.now(UTC)
            self.cancellation_reason = reason
        self.mark_changed()
        return self.status

    def approve(self) -> None:
        self.apply(AppointmentEvent.APPROVE)

    def send_to_review(self) -> None:
        self.apply(AppointmentEvent.SEND_TO_REVIEW)

    def cancel(self, reason: str | None = None) -> None:
        self.apply(AppointmentEvent.CANCEL, reason=reason)

    def complete(self) -> None:
        self.apply(AppointmentEvent.COMPLETE)

    def mark_no_show(self) -> None:
        self.apply(AppointmentEvent.MARK_NO_SHOW)

    def reprogram(
        self,
        new_date: date,
        new_hour: time,
        slot_id: str,
        schedule_id: str,
        observation: str | None = None,
    ) -> None:
        """Move the appointment; status is left unchanged."""
        self.appointment_date = new_date
        self.hour = new_hour
        self.slot_id = slot_id
        self.schedule_id = schedule_id
        if observation is not None:
            self.observation = observation
        self.reprogrammed = True
        self.mark_changed()
