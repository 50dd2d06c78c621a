"""
Slot Lifecycle Use Cases

Soft delete and restore of recurring slots.
"""

import logging

from agenda.core.domain import EntityNotFoundException, ValidationException

from ...domain.entities.recurring_slot import RecurringSlot
from ...domain.services.slot_overlap_service import SlotOverlapService
from ..ports.unit_of_work import IUnitOfWork
from .register_slot import ensure_no_overlap

logger = logging.getLogger(__name__)


class SoftDeleteSlotUseCase:
    """Marks a slot as deleted; it stops producing times immediately."""

    def __init__(self, uow: IUnitOfWork) -> None:
        self._uow = uow

    async def execute(self, slot_id: str) -> RecurringSlot:
        async with self._uow as uow:
            slot = await uow.slots.find_by_id(slot_id)
            if slot is None:
                raise EntityNotFoundException("RecurringSlot", slot_id)
            if slot.is_deleted():
                raise ValidationException(f"Slot {slot_id} is already deleted", field="slot_id")

            slot.soft_delete()
            saved = await uow.slots.update(slot)
            await uow.commit()

        logger.info(f"Slot soft-deleted: {slot_id}")
        return saved


class RestoreSlotUseCase:
    """Clears the deletion mark after re-checking the grid for collisions."""

    def __init__(self, uow: IUnitOfWork, overlap_service: SlotOverlapService | None = None) -> None:
        self._uow = uow
        self._service = overlap_service or SlotOverlapService()

    async def execute(self, slot_id: str) -> RecurringSlot:
        """
        Restore a soft-deleted slot.

        Raises:
            EntityNotFoundException: If the slot does not exist
            ValidationException: If the slot is not deleted
            SlotOverlapException: If another active slot now shares a time
        """
        async with self._uow as uow:
            slot = await uow.slots.find_by_id(slot_id)
            if slot is None:
                raise EntityNotFoundException("RecurringSlot", slot_id)
            if not slot.is_deleted():
                raise ValidationException(f"Slot {slot_id} is not deleted", field="slot_id")

            slot.restore()
            if slot.is_bookable():
                windows_by_id = await uow.windows.find_by_ids(slot.schedule_ids)
                windows = [windows_by_id[i] for i in slot.schedule_ids if i in windows_by_id]
                await ensure_no_overlap(uow, self._service, slot, windows)

            saved = await uow.slots.update(slot)
            await uow.commit()

        logger.info(f"Slot restored: {slot_id}")
        return saved
