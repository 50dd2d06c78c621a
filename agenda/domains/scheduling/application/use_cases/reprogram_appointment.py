# ============================================================================
# SCOPE: APPLICATION LAYER (Scheduling)
# Description: Use case for moving an appointment to another date and hour.
# ============================================================================
"""Reprogram Appointment Use Case.

Read-modify-write of one appointment row inside a single unit of work; the
row is locked from the read until commit. The practitioner never changes.
"""

import logging

from agenda.core.domain import EntityNotFoundException, SlotAlreadyTakenException

from ...domain.entities.appointment import Appointment
from ...domain.services.availability_service import AvailabilityService
from ...domain.value_objects.hours import format_hour
from ..dto.scheduling_dtos import ReprogramAppointmentRequest
from ..ports.clock_port import IClock
from ..ports.unit_of_work import IUnitOfWork
from .book_appointment import ensure_not_past, load_explicit_target

logger = logging.getLogger(__name__)


class ReprogramAppointmentUseCase:
    """Use case for reprogramming an appointment.

    Terminal appointments are treated as missing. Reprogramming onto the
    appointment's own date and hour succeeds.
    """

    def __init__(
        self,
        uow: IUnitOfWork,
        clock: IClock,
        availability_service: AvailabilityService | None = None,
        alignment_suggestions: int = 3,
    ) -> None:
        self._uow = uow
        self._clock = clock
        self._service = availability_service or AvailabilityService()
        self._suggestions = alignment_suggestions

    async def execute(self, request: ReprogramAppointmentRequest) -> Appointment:
        """Execute the reprogramming.

        Raises:
            ValidationException: New date and hour are in the past.
            EntityNotFoundException: Missing or terminal appointment, unknown slot or window.
            InvalidSlotAlignmentException: New slot is not the practitioner's or cannot host the hour.
            SlotAlreadyTakenException: Destination held by another appointment.
            ConcurrentModificationException: The appointment changed after it was read.
        """
        ensure_not_past(self._clock, request.new_date, request.new_hour)

        async with self._uow as uow:
            appointment = await uow.appointments.find_by_id_for_update(request.appointment_id)
            if appointment is None or appointment.is_terminal:
                raise EntityNotFoundException("Appointment", request.appointment_id)

            await load_explicit_target(
                uow,
                self._service,
                appointment.practitioner_id,
                request.new_date,
                request.new_hour,
                request.slot_id,
                request.schedule_id,
                self._suggestions,
            )

            if await uow.appointments.exists_active_at(
                appointment.practitioner_id,
                request.new_date,
                request.new_hour,
                exclude_appointment_id=appointment.id,
            ):
                raise SlotAlreadyTakenException(
                    appointment.practitioner_id,
                    request.new_date.isoformat(),
                    format_hour(request.new_hour),
                )

            previous = f"{appointment.appointment_date} {format_hour(appointment.hour)}" if appointment.hour else "-"
            appointment.reprogram(
                new_date=request.new_date,
                new_hour=request.new_hour,
                slot_id=request.slot_id,
                schedule_id=request.schedule_id,
                observation=request.observation,
            )
            saved = await uow.appointments.update(appointment)
            await uow.commit()

        logger.info(
            f"Appointment {saved.id} reprogrammed from {previous} to "
            f"{request.new_date} {format_hour(request.new_hour)}"
        )
        return saved
