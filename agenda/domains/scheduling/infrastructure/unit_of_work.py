"""
SQLAlchemy Unit of Work

One AsyncSession per unit of work; repositories share it so that checks and
writes run in the same transaction.
"""

import logging
from types import TracebackType
from typing import Self

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from agenda.domains.scheduling.application.ports.unit_of_work import IUnitOfWork
from agenda.domains.scheduling.infrastructure.repositories import (
    SQLAlchemyAppointmentRepository,
    SQLAlchemyDirectory,
    SQLAlchemyScheduleWindowRepository,
    SQLAlchemySlotRepository,
)

logger = logging.getLogger(__name__)


class SQLAlchemyUnitOfWork(IUnitOfWork):
    """
    Unit of work over an ``async_sessionmaker``.

    Example:
        ```python
        async with SQLAlchemyUnitOfWork(AsyncSessionLocal) as uow:
            await uow.appointments.add(appointment)
            await uow.commit()
        ```
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
        self._session: AsyncSession | None = None
        self._committed = False

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("Unit of work is not active; use 'async with'")
        return self._session

    async def __aenter__(self) -> Self:
        self._session = self._session_factory()
        self._committed = False
        self.directory = SQLAlchemyDirectory(self._session)
        self.slots = SQLAlchemySlotRepository(self._session)
        self.windows = SQLAlchemyScheduleWindowRepository(self._session)
        self.appointments = SQLAlchemyAppointmentRepository(self._session)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            if exc_type is not None or not self._committed:
                await self.rollback()
                if exc_type is not None:
                    logger.debug(f"Unit of work rolled back after {exc_type.__name__}")
        finally:
            await self.session.close()
            self._session = None

    async def commit(self) -> None:
        await self.session.commit()
        self._committed = True

    async def rollback(self) -> None:
        await self.session.rollback()
