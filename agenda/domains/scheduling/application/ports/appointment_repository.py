"""
Appointment Repository Port

Interface for appointment data access following Clean Architecture.
"""

from datetime import date, time
from typing import Protocol, runtime_checkable

from agenda.domains.scheduling.domain.entities.appointment import Appointment


@runtime_checkable
class IAppointmentRepository(Protocol):
    """
    Appointment repository interface.

    Implementations must reject a second non-cancelled appointment for the
    same (practitioner, date, hour) with ``SlotAlreadyTakenException``.
    """

    async def find_by_id(self, appointment_id: str) -> Appointment | None:
        """
        Find appointment by ID.

        Args:
            appointment_id: Unique appointment identifier

        Returns:
            Appointment if found, None otherwise
        """
        ...

    async def find_by_id_for_update(self, appointment_id: str) -> Appointment | None:
        """
        Find appointment by ID and hold it against concurrent writers until
        the unit of work ends.

        Used by every read-modify-write of an appointment (reprogram, status
        change).
        """
        ...

    async def find_booked_hours(self, practitioner_id: str, appointment_date: date) -> list[time]:
        """
        Hours of the non-cancelled appointments of a practitioner on a date.

        Returns:
            Sorted list of hours
        """
        ...

    async def exists_active_at(
        self,
        practitioner_id: str,
        appointment_date: date,
        hour: time,
        exclude_appointment_id: str | None = None,
    ) -> bool:
        """
        Check whether a non-cancelled appointment holds the tuple.

        Args:
            practitioner_id: Practitioner ID
            appointment_date: Date
            hour: Hour
            exclude_appointment_id: Appointment ID to ignore (for reprogramming)

        Returns:
            True if the tuple is taken
        """
        ...

    async def add(self, appointment: Appointment) -> Appointment:
        """
        Persist a new appointment.

        Raises:
            SlotAlreadyTakenException: If the store rejects the tuple
        """
        ...

    async def update(self, appointment: Appointment) -> Appointment:
        """
        Persist changes to an existing appointment.

        Raises:
            SlotAlreadyTakenException: If the store rejects the tuple
            ConcurrentModificationException: If the row changed since it was read
        """
        ...
