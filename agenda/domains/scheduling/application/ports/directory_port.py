"""
Directory Port

Read-only lookups of practitioners, patients, branches, locations and
appointment types, which are managed outside the scheduling engine.
"""

from typing import Protocol, runtime_checkable

from agenda.domains.scheduling.domain.value_objects.type_availability import TypeAvailability


@runtime_checkable
class IDirectory(Protocol):
    """Existence checks by id against the reference tables."""

    async def practitioner_exists(self, practitioner_id: str) -> bool:
        ...

    async def patient_exists(self, patient_id: str) -> bool:
        ...

    async def branch_exists(self, branch_id: str) -> bool:
        ...

    async def location_exists(self, location_id: str) -> bool:
        ...

    async def lock_practitioner(self, practitioner_id: str) -> bool:
        """
        Hold the practitioner row until the unit of work ends, serializing
        changes to that practitioner's recurring slots.

        Returns:
            False if the practitioner does not exist
        """
        ...

    async def find_type_availabilities(self, appointment_type_id: str) -> list[TypeAvailability] | None:
        """
        Per-weekday hours in which an appointment type may be given.

        Returns:
            None for an unknown type; an empty list when the type has no
            restriction
        """
        ...
