"""
Get Appointment Use Case
"""

from agenda.core.domain import EntityNotFoundException

from ...domain.entities.appointment import Appointment
from ..ports.unit_of_work import IUnitOfWork


class GetAppointmentUseCase:
    """Use case for reading one appointment."""

    def __init__(self, uow: IUnitOfWork) -> None:
        self._uow = uow

    async def execute(self, appointment_id: str) -> Appointment:
        async with self._uow as uow:
            appointment = await uow.appointments.find_by_id(appointment_id)
        if appointment is None:
            raise EntityNotFoundException("Appointment", appointment_id)
        return appointment
