"""
Scheduling Use Cases
"""

from agenda.domains.scheduling.application.use_cases.book_appointment import BookAppointmentUseCase
from agenda.domains.scheduling.application.use_cases.get_appointment import GetAppointmentUseCase
from agenda.domains.scheduling.application.use_cases.get_availability import GetAvailabilityUseCase
from agenda.domains.scheduling.application.use_cases.register_slot import RegisterSlotUseCase
from agenda.domains.scheduling.application.use_cases.reprogram_appointment import ReprogramAppointmentUseCase
from agenda.domains.scheduling.application.use_cases.slot_lifecycle import RestoreSlotUseCase, SoftDeleteSlotUseCase
from agenda.domains.scheduling.application.use_cases.transition_appointment import TransitionAppointmentUseCase

__all__ = [
    "GetAvailabilityUseCase",
    "BookAppointmentUseCase",
    "ReprogramAppointmentUseCase",
    "TransitionAppointmentUseCase",
    "GetAppointmentUseCase",
    "RegisterSlotUseCase",
    "SoftDeleteSlotUseCase",
    "RestoreSlotUseCase",
]
