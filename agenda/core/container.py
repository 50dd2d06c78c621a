# ============================================================================
# SCOPE: GLOBAL
# Description: Contenedor de inyección de dependencias del dominio de agenda.
#              Conecta puertos con implementaciones SQLAlchemy.
# ============================================================================
"""
Scheduling Container.

Creates units of work, the clock and every scheduling use case.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from agenda.config.settings import Settings, get_settings
from agenda.domains.scheduling.application.ports import IClock, IUnitOfWork
from agenda.domains.scheduling.application.use_cases import (
    BookAppointmentUseCase,
    GetAppointmentUseCase,
    GetAvailabilityUseCase,
    RegisterSlotUseCase,
    ReprogramAppointmentUseCase,
    RestoreSlotUseCase,
    SoftDeleteSlotUseCase,
    TransitionAppointmentUseCase,
)
from agenda.domains.scheduling.domain.services import AvailabilityService, SlotOverlapService
from agenda.domains.scheduling.infrastructure.clock import SystemClock
from agenda.domains.scheduling.infrastructure.unit_of_work import SQLAlchemyUnitOfWork

logger = logging.getLogger(__name__)


class SchedulingContainer:
    """
    Scheduling domain container.

    Single Responsibility: Wire scheduling ports to their implementations.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        settings: Settings | None = None,
    ):
        """
        Initialize scheduling container.

        Args:
            session_factory: Session factory for units of work (defaults to
                the application's AsyncSessionLocal)
            settings: Application settings
        """
        if session_factory is None:
            from agenda.database.async_db import AsyncSessionLocal

            session_factory = AsyncSessionLocal
        self._session_factory = session_factory
        self.settings = settings or get_settings()
        self._availability_service = AvailabilityService()
        self._overlap_service = SlotOverlapService()

    # ==================== INFRASTRUCTURE ====================

    def create_unit_of_work(self) -> IUnitOfWork:
        """Create a new unit of work."""
        return SQLAlchemyUnitOfWork(self._session_factory)

    def create_clock(self) -> IClock:
        """Create the clock in the configured timezone."""
        return SystemClock(self.settings.timezone)

    # ==================== AVAILABILITY ====================

    def create_get_availability_use_case(self) -> GetAvailabilityUseCase:
        """Create GetAvailabilityUseCase."""
        return GetAvailabilityUseCase(
            uow=self.create_unit_of_work(),
            clock=self.create_clock(),
            availability_service=self._availability_service,
        )

    # ==================== APPOINTMENTS ====================

    def create_book_appointment_use_case(self) -> BookAppointmentUseCase:
        """Create BookAppointmentUseCase."""
        return BookAppointmentUseCase(
            uow=self.create_unit_of_work(),
            clock=self.create_clock(),
            availability_service=self._availability_service,
            alignment_suggestions=self.settings.ALIGNMENT_SUGGESTIONS,
        )

    def create_reprogram_appointment_use_case(self) -> ReprogramAppointmentUseCase:
        """Create ReprogramAppointmentUseCase."""
        return ReprogramAppointmentUseCase(
            uow=self.create_unit_of_work(),
            clock=self.create_clock(),
            availability_service=self._availability_service,
            alignment_suggestions=self.settings.ALIGNMENT_SUGGESTIONS,
        )

    def create_transition_appointment_use_case(self) -> TransitionAppointmentUseCase:
        """Create TransitionAppointmentUseCase."""
        return TransitionAppointmentUseCase(uow=self.create_unit_of_work())

    def create_get_appointment_use_case(self) -> GetAppointmentUseCase:
        """Create GetAppointmentUseCase."""
        return GetAppointmentUseCase(uow=self.create_unit_of_work())

    # ==================== SLOTS ====================

    def create_register_slot_use_case(self) -> RegisterSlotUseCase:
        """Create RegisterSlotUseCase."""
        return RegisterSlotUseCase(
            uow=self.create_unit_of_work(),
            overlap_service=self._overlap_service,
            default_duration_minutes=self.settings.DEFAULT_SLOT_DURATION_MINUTES,
        )

    def create_soft_delete_slot_use_case(self) -> SoftDeleteSlotUseCase:
        """Create SoftDeleteSlotUseCase."""
        return SoftDeleteSlotUseCase(uow=self.create_unit_of_work())

    def create_restore_slot_use_case(self) -> RestoreSlotUseCase:
        """Create RestoreSlotUseCase."""
        return RestoreSlotUseCase(uow=self.create_unit_of_work(), overlap_service=self._overlap_service)


# Global container instance
_container: SchedulingContainer | None = None


def get_container() -> SchedulingContainer:
    """
    Get global container instance (singleton).

    Returns:
        SchedulingContainer instance
    """
    global _container

    if _container is None:
        logger.info("Initializing global SchedulingContainer")
        _container = SchedulingContainer()

    return _container


def reset_container() -> None:
    """Reset global container (mainly for tests)."""
    global _container
    _container = None
