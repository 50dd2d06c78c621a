"""
Scheduling Application Ports

Interfaces the use cases depend on (Dependency Inversion).
"""

from agenda.domains.scheduling.application.ports.appointment_repository import IAppointmentRepository
from agenda.domains.scheduling.application.ports.clock_port import IClock
from agenda.domains.scheduling.application.ports.directory_port import IDirectory
from agenda.domains.scheduling.application.ports.schedule_window_repository import IScheduleWindowRepository
from agenda.domains.scheduling.application.ports.slot_repository import ISlotRepository
from agenda.domains.scheduling.application.ports.unit_of_work import IUnitOfWork

__all__ = [
    "IAppointmentRepository",
    "IClock",
    "IDirectory",
    "IScheduleWindowRepository",
    "ISlotRepository",
    "IUnitOfWork",
]
