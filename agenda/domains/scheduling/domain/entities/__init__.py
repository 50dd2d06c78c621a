"""
Scheduling Domain Entities

Business entities with identity and lifecycle for the scheduling domain.
"""

from agenda.domains.scheduling.domain.entities.appointment import Appointment
from agenda.domains.scheduling.domain.entities.recurring_slot import RecurringSlot
from agenda.domains.scheduling.domain.entities.schedule_window import ScheduleWindow

__all__ = [
    "ScheduleWindow",
    "RecurringSlot",
    "Appointment",
]
