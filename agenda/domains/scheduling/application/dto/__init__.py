"""
Scheduling Application DTOs
"""

from agenda.domains.scheduling.application.dto.scheduling_dtos import (
    AvailableDayDTO,
    AvailableTimeDTO,
    BookAppointmentRequest,
    GetAvailabilityRequest,
    RegisterSlotRequest,
    ReprogramAppointmentRequest,
    ScheduleWindowInput,
    TransitionAppointmentRequest,
)

__all__ = [
    "GetAvailabilityRequest",
    "BookAppointmentRequest",
    "ReprogramAppointmentRequest",
    "TransitionAppointmentRequest",
    "ScheduleWindowInput",
    "RegisterSlotRequest",
    "AvailableTimeDTO",
    "AvailableDayDTO",
]
