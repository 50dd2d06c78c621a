# ============================================================================
# SCOPE: APPLICATION LAYER (Scheduling)
# Description: Use case for booking a new appointment, with an explicit
#              (slot, window) target or auto-resolved from the hour.
# ============================================================================
"""Book Appointment Use Case.

Turns a requested time into a PENDING appointment. The uniqueness check and
the insert run in the same unit of work; the store's partial unique index
settles concurrent bookings.
"""

import logging
from datetime import date, datetime, time

from agenda.core.domain import (
    EntityNotFoundException,
    NoMatchingSlotException,
    SlotAlreadyTakenException,
    ValidationException,
    generate_uuid_str,
)

from ...domain.entities.appointment import Appointment
from ...domain.entities.recurring_slot import RecurringSlot
from ...domain.entities.schedule_window import ScheduleWindow
from ...domain.services.availability_service import AvailabilityService
from ...domain.value_objects.appointment_status import AppointmentStatus
from ...domain.value_objects.booking_target import AutoResolve, ExplicitSlot
from ...domain.value_objects.hours import format_hour
from ..dto.scheduling_dtos import BookAppointmentRequest
from ..ports.clock_port import IClock
from ..ports.unit_of_work import IUnitOfWork
from .get_availability import load_day_schedule

logger = logging.getLogger(__name__)


def ensure_not_past(clock: IClock, target_date: date, hour: time) -> None:
    """Reject a date and hour earlier than now."""
    if datetime.combine(target_date, hour) < clock.now():
        raise ValidationException(
            f"Cannot schedule an appointment in the past ({target_date.isoformat()} {format_hour(hour)})",
            field="date",
        )


async def load_explicit_target(
    uow: IUnitOfWork,
    service: AvailabilityService,
    practitioner_id: str,
    target_date: date,
    hour: time,
    slot_id: str,
    schedule_id: str,
    suggestions: int,
) -> tuple[RecurringSlot, ScheduleWindow]:
    """
    Load and check an explicitly chosen (slot, window) pair.

    Raises:
        EntityNotFoundException: If the slot (or a soft-deleted one) or the
            window does not exist
        InvalidSlotAlignmentException: If the pair cannot host the hour
    """
    slot = await uow.slots.find_by_id(slot_id)
    if slot is None or slot.is_deleted():
        raise EntityNotFoundException("RecurringSlot", slot_id)

    windows = await uow.windows.find_by_ids([schedule_id])
    window = windows.get(schedule_id)
    if window is None:
        raise EntityNotFoundException("ScheduleWindow", schedule_id)

    service.check_alignment(slot, window, practitioner_id, target_date, hour, suggestions)
    return slot, window


class BookAppointmentUseCase:
    """Use case for booking an appointment.

    Single Responsibility: Only handles appointment booking logic
    Dependency Inversion: Depends on ports, not implementations
    """

    def __init__(
        self,
        uow: IUnitOfWork,
        clock: IClock,
        availability_service: AvailabilityService | None = None,
        alignment_suggestions: int = 3,
    ) -> None:
        """Initialize use case.

        Args:
            uow: Unit of work giving access to the repositories.
            clock: Current time in the scheduling timezone.
            availability_service: Grid resolution service.
            alignment_suggestions: Nearest valid times reported on misalignment.
        """
        self._uow = uow
        self._clock = clock
        self._service = availability_service or AvailabilityService()
        self._suggestions = alignment_suggestions

    async def execute(self, request: BookAppointmentRequest) -> Appointment:
        """Execute the booking.

        Args:
            request: Practitioner, patient, date, hour and booking target.

        Returns:
            The persisted appointment, in PENDING status.

        Raises:
            ValidationException: Invalid duration or a time in the past.
            EntityNotFoundException: Unknown practitioner, patient, slot or window.
            InvalidSlotAlignmentException: Explicit target cannot host the hour.
            NoMatchingSlotException: No available entry at the hour (auto-resolve).
            SlotAlreadyTakenException: The practitioner is already booked then.
        """
        if request.custom_duration is not None and request.custom_duration <= 0:
            raise ValidationException("custom_duration must be greater than 0", field="custom_duration")
        ensure_not_past(self._clock, request.appointment_date, request.hour)

        hour_str = format_hour(request.hour)
        date_str = request.appointment_date.isoformat()

        async with self._uow as uow:
            if not await uow.directory.practitioner_exists(request.practitioner_id):
                raise EntityNotFoundException("Practitioner", request.practitioner_id)
            if not await uow.directory.patient_exists(request.patient_id):
                raise EntityNotFoundException("Patient", request.patient_id)

            target = request.target
            if isinstance(target, ExplicitSlot):
                slot, window = await load_explicit_target(
                    uow,
                    self._service,
                    request.practitioner_id,
                    request.appointment_date,
                    request.hour,
                    target.slot_id,
                    target.schedule_id,
                    self._suggestions,
                )
                schedule_id = window.id or ""
            elif isinstance(target, AutoResolve):
                day = await load_day_schedule(
                    uow,
                    self._service,
                    request.practitioner_id,
                    request.appointment_date,
                    self._clock.now(),
                )
                candidate = next((c for c in day.available if c.time == request.hour), None)
                if candidate is None:
                    raise NoMatchingSlotException(request.practitioner_id, date_str, hour_str)
                slot = day.slot(candidate.slot_id)
                schedule_id = candidate.schedule_id
            else:
                raise ValidationException(f"Unsupported booking target {target!r}", field="target")

            if await uow.appointments.exists_active_at(
                request.practitioner_id, request.appointment_date, request.hour
            ):
                raise SlotAlreadyTakenException(request.practitioner_id, date_str, hour_str)

            appointment = Appointment(
                id=generate_uuid_str(),
                patient_id=request.patient_id,
                practitioner_id=request.practitioner_id,
                slot_id=slot.id or "",
                schedule_id=schedule_id,
                appointment_date=request.appointment_date,
                hour=request.hour,
                duration_minutes=request.custom_duration or slot.duration_minutes,
                status=AppointmentStatus.PENDING,
                observation=request.observation,
            )
            saved = await uow.appointments.add(appointment)
            await uow.commit()

        logger.info(
            f"Appointment booked: {saved.id} for patient {request.patient_id} with practitioner "
            f"{request.practitioner_id} on {date_str} at {hour_str}"
        )
        return saved
