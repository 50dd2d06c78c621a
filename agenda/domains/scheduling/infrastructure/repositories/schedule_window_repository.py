"""
Schedule Window Repository Implementation

SQLAlchemy implementation of IScheduleWindowRepository.
"""

import logging
from collections.abc import Iterable
from datetime import time

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.core.domain import generate_uuid_str
from agenda.domains.scheduling.application.ports.schedule_window_repository import IScheduleWindowRepository
from agenda.domains.scheduling.domain.entities.schedule_window import ScheduleWindow
from agenda.domains.scheduling.infrastructure.persistence.sqlalchemy.models import ScheduleWindowModel

from .ids import is_unique_violation, is_valid_uuid

logger = logging.getLogger(__name__)


class SQLAlchemyScheduleWindowRepository(IScheduleWindowRepository):
    """
    SQLAlchemy implementation of schedule window repository.

    Windows are find-or-create by their bounds; concurrent creation of the
    same bounds is settled by the unique index.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_ids(self, schedule_ids: Iterable[str]) -> dict[str, ScheduleWindow]:
        """Load windows by id."""
        ids = [schedule_id for schedule_id in set(schedule_ids) if is_valid_uuid(schedule_id)]
        if not ids:
            return {}

        result = await self.session.execute(select(ScheduleWindowModel).where(ScheduleWindowModel.id.in_(ids)))
        return {model.id: self._to_entity(model) for model in result.scalars().all()}

    async def find_or_create(
        self,
        opening_hour: time,
        close_hour: time,
        overtime_start_hour: time | None = None,
    ) -> ScheduleWindow:
        """Return the window with these bounds, creating it when missing."""
        existing = await self._find_by_bounds(opening_hour, close_hour, overtime_start_hour)
        if existing is not None:
            return self._to_entity(existing)

        model = ScheduleWindowModel(
            id=generate_uuid_str(),
            opening_hour=opening_hour,
            close_hour=close_hour,
            overtime_start_hour=overtime_start_hour,
        )
        try:
            async with self.session.begin_nested():
                self.session.add(model)
        except IntegrityError as e:
            # Handle race condition - another transaction created the same bounds
            if not is_unique_violation(e, "uq_schedule_windows_bounds"):
                raise
            existing = await self._find_by_bounds(opening_hour, close_hour, overtime_start_hour)
            if existing is None:
                raise
            logger.info(f"Found existing schedule window after race condition: {existing.id}")
            return self._to_entity(existing)

        logger.info(f"Created schedule window {model.id}")
        return self._to_entity(model)

    async def _find_by_bounds(
        self,
        opening_hour: time,
        close_hour: time,
        overtime_start_hour: time | None,
    ) -> ScheduleWindowModel | None:
        query = select(ScheduleWindowModel).where(
            ScheduleWindowModel.opening_hour == opening_hour,
            ScheduleWindowModel.close_hour == close_hour,
        )
        if overtime_start_hour is None:
            query = query.where(ScheduleWindowModel.overtime_start_hour.is_(None))
        else:
            query = query.where(ScheduleWindowModel.overtime_start_hour == overtime_start_hour)

        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none()

    # Mapping methods

    def _to_entity(self, model: ScheduleWindowModel) -> ScheduleWindow:
        """Convert model to entity."""
        window = ScheduleWindow(
            id=model.id,
            opening_hour=model.opening_hour,
            close_hour=model.close_hour,
            overtime_start_hour=model.overtime_start_hour,
        )
        if model.created_at:
            window.created_at = model.created_at  # type: ignore[assignment]
        if model.updated_at:
            window.updated_at = model.updated_at  # type: ignore[assignment]
        return window
