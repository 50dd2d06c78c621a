"""
Scheduling Repository Implementations
"""

from agenda.domains.scheduling.infrastructure.repositories.appointment_repository import (
    SQLAlchemyAppointmentRepository,
)
from agenda.domains.scheduling.infrastructure.repositories.directory_repository import SQLAlchemyDirectory
from agenda.domains.scheduling.infrastructure.repositories.schedule_window_repository import (
    SQLAlchemyScheduleWindowRepository,
)
from agenda.domains.scheduling.infrastructure.repositories.slot_repository import SQLAlchemySlotRepository

__all__ = [
    "SQLAlchemyAppointmentRepository",
    "SQLAlchemyDirectory",
    "SQLAlchemyScheduleWindowRepository",
    "SQLAlchemySlotRepository",
]
