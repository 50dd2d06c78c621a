"""
Transition Appointment Use Case

Applies an externally triggered lifecycle event to an appointment.
"""

import logging

from agenda.core.domain import EntityNotFoundException

from ...domain.entities.appointment import Appointment
from ..dto.scheduling_dtos import TransitionAppointmentRequest
from ..ports.unit_of_work import IUnitOfWork

logger = logging.getLogger(__name__)


class TransitionAppointmentUseCase:
    """Use case for appointment status changes.

    Cancelling releases the (practitioner, date, hour) tuple.
    """

    def __init__(self, uow: IUnitOfWork) -> None:
        self._uow = uow

    async def execute(self, request: TransitionAppointmentRequest) -> Appointment:
        """
        Execute the transition.

        Raises:
            EntityNotFoundException: If the appointment does not exist
            InvalidTransitionException: If the event is not allowed from the current status
            ConcurrentModificationException: If the appointment changed after it was read
        """
        async with self._uow as uow:
            appointment = await uow.appointments.find_by_id_for_update(request.appointment_id)
            if appointment is None:
                raise EntityNotFoundException("Appointment", request.appointment_id)

            previous = appointment.status
            appointment.apply(request.event, reason=request.reason)
            saved = await uow.appointments.update(appointment)
            await uow.commit()

        logger.info(
            f"Appointment {saved.id}: {previous.value} --{request.event.value}--> {saved.status.value}"
        )
        return saved

