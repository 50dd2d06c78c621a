"""
Recurring Slot Repository Port

Interface for recurring slot data access following Clean Architecture.
"""

from typing import Protocol, runtime_checkable

from agenda.domains.scheduling.domain.entities.recurring_slot import RecurringSlot
from agenda.domains.scheduling.domain.value_objects.day_of_week import DayOfWeek


@runtime_checkable
class ISlotRepository(Protocol):
    """
    Recurring slot repository interface.

    Defines the contract for recurring slot data access operations.
    """

    async def find_by_id(self, slot_id: str) -> RecurringSlot | None:
        """
        Find slot by ID, soft-deleted ones included.

        Args:
            slot_id: Unique slot identifier

        Returns:
            RecurringSlot if found, None otherwise
        """
        ...

    async def find_by_practitioner_and_day(
        self,
        practitioner_id: str,
        day_of_week: DayOfWeek,
        include_unavailable: bool = False,
    ) -> list[RecurringSlot]:
        """
        Find the non-deleted slots of a practitioner on a weekday.

        Args:
            practitioner_id: Practitioner ID
            day_of_week: Weekday
            include_unavailable: Also return slots flagged unavailable

        Returns:
            Slots ordered by creation, with their schedule ids loaded
        """
        ...

    async def add(self, slot: RecurringSlot) -> RecurringSlot:
        """Persist a new slot and its schedule attachments."""
        ...

    async def update(self, slot: RecurringSlot) -> RecurringSlot:
        """Persist changes to an existing slot."""
        ...
