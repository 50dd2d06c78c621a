"""
Recurring Slot Repository Implementation

SQLAlchemy implementation of ISlotRepository. Schedule attachments live in
the ``recurring_slot_windows`` join table and are read and written with Core
statements.
"""

import logging
from collections import defaultdict

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.core.domain import EntityNotFoundException
from agenda.domains.scheduling.application.ports.slot_repository import ISlotRepository
from agenda.domains.scheduling.domain.entities.recurring_slot import RecurringSlot
from agenda.domains.scheduling.domain.value_objects.day_of_week import DayOfWeek
from agenda.domains.scheduling.infrastructure.persistence.sqlalchemy.models import (
    RecurringSlotModel,
    ScheduleWindowModel,
    recurring_slot_windows,
)

from .ids import is_valid_uuid

logger = logging.getLogger(__name__)


class SQLAlchemySlotRepository(ISlotRepository):
    """
    SQLAlchemy implementation of recurring slot repository.

    Handles all recurring slot data persistence operations.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, slot_id: str) -> RecurringSlot | None:
        """Find slot by ID, soft-deleted ones included."""
        if not is_valid_uuid(slot_id):
            return None
        model = await self.session.get(RecurringSlotModel, slot_id)
        if model is None:
            return None
        schedule_ids = await self._load_schedule_ids([model.id])
        return self._to_entity(model, schedule_ids.get(model.id, []))

    async def find_by_practitioner_and_day(
        self,
        practitioner_id: str,
        day_of_week: DayOfWeek,
        include_unavailable: bool = False,
    ) -> list[RecurringSlot]:
        """Find the non-deleted slots of a practitioner on a weekday."""
        if not is_valid_uuid(practitioner_id):
            return []

        query = select(RecurringSlotModel).where(
            RecurringSlotModel.practitioner_id == practitioner_id,
            RecurringSlotModel.day_of_week == day_of_week.value,
            RecurringSlotModel.deleted_at.is_(None),
        )
        if not include_unavailable:
            query = query.where(RecurringSlotModel.unavailable.is_(False))

        query = query.order_by(RecurringSlotModel.created_at, RecurringSlotModel.id)

        result = await self.session.execute(query)
        models = result.scalars().all()
        schedule_ids = await self._load_schedule_ids([m.id for m in models])
        return [self._to_entity(m, schedule_ids.get(m.id, [])) for m in models]

    async def add(self, slot: RecurringSlot) -> RecurringSlot:
        """Persist a new slot and its schedule attachments."""
        model = self._to_model(slot)
        self.session.add(model)
        await self.session.flush()

        if slot.schedule_ids:
            await self.session.execute(
                insert(recurring_slot_windows),
                [{"slot_id": model.id, "schedule_id": schedule_id} for schedule_id in slot.schedule_ids],
            )

        return self._to_entity(model, list(slot.schedule_ids))

    async def update(self, slot: RecurringSlot) -> RecurringSlot:
        """Persist changes to an existing slot."""
        model = await self.session.get(RecurringSlotModel, slot.id) if is_valid_uuid(slot.id) else None
        if model is None:
            raise EntityNotFoundException("RecurringSlot", slot.id)

        self._update_model(model, slot)
        await self.session.flush()
        await self._sync_schedule_ids(model.id, slot.schedule_ids)

        return self._to_entity(model, list(slot.schedule_ids))

    async def _load_schedule_ids(self, slot_ids: list[str]) -> dict[str, list[str]]:
        if not slot_ids:
            return {}

        result = await self.session.execute(
            select(recurring_slot_windows.c.slot_id, recurring_slot_windows.c.schedule_id)
            .join(ScheduleWindowModel, ScheduleWindowModel.id == recurring_slot_windows.c.schedule_id)
            .where(recurring_slot_windows.c.slot_id.in_(slot_ids))
            .order_by(ScheduleWindowModel.opening_hour)
        )
        schedule_ids: dict[str, list[str]] = defaultdict(list)
        for slot_id, schedule_id in result.all():
            schedule_ids[slot_id].append(schedule_id)
        return schedule_ids

    async def _sync_schedule_ids(self, slot_id: str, wanted: list[str]) -> None:
        current = set((await self._load_schedule_ids([slot_id])).get(slot_id, []))
        target = set(wanted)

        removed = current - target
        if removed:
            await self.session.execute(
                delete(recurring_slot_windows).where(
                    recurring_slot_windows.c.slot_id == slot_id,
                    recurring_slot_windows.c.schedule_id.in_(removed),
                )
            )
        added = target - current
        if added:
            await self.session.execute(
                insert(recurring_slot_windows),
                [{"slot_id": slot_id, "schedule_id": schedule_id} for schedule_id in added],
            )

    # Mapping methods

    def _to_entity(self, model: RecurringSlotModel, schedule_ids: list[str]) -> RecurringSlot:
        """Convert model to entity."""
        slot = RecurringSlot(
            id=model.id,
            practitioner_id=model.practitioner_id,
            branch_id=model.branch_id,
            location_id=model.location_id,
            day_of_week=DayOfWeek(model.day_of_week),
            duration_minutes=model.duration_minutes,
            unavailable=model.unavailable,
            schedule_ids=schedule_ids,
            deleted_at=model.deleted_at,
            version=model.version or 0,
        )
        if model.created_at:
            slot.created_at = model.created_at  # type: ignore[assignment]
        if model.updated_at:
            slot.updated_at = model.updated_at  # type: ignore[assignment]
        return slot

    def _to_model(self, slot: RecurringSlot) -> RecurringSlotModel:
        """Convert entity to model."""
        return RecurringSlotModel(
            id=slot.id,
            practitioner_id=slot.practitioner_id,
            branch_id=slot.branch_id,
            location_id=slot.location_id,
            day_of_week=slot.day_of_week.value,
            duration_minutes=slot.duration_minutes,
            unavailable=slot.unavailable,
            deleted_at=slot.deleted_at,
            version=slot.version,
        )

    def _update_model(self, model: RecurringSlotModel, slot: RecurringSlot) -> None:
        """Update model from entity."""
        model.location_id = slot.location_id
        model.duration_minutes = slot.duration_minutes
        model.unavailable = slot.unavailable
        model.deleted_at = slot.deleted_at
        model.version = slot.version
