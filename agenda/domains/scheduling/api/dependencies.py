"""
Scheduling API Dependencies

FastAPI dependencies for the scheduling domain.
"""

from agenda.core.container import get_container
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


def get_availability_use_case() -> GetAvailabilityUseCase:
    """Get GetAvailabilityUseCase instance with its own unit of work."""
    container = get_container()
    return container.create_get_availability_use_case()


def get_book_appointment_use_case() -> BookAppointmentUseCase:
    """Get BookAppointmentUseCase instance with its own unit of work."""
    container = get_container()
    return container.create_book_appointment_use_case()


def get_reprogram_appointment_use_case() -> ReprogramAppointmentUseCase:
    """Get ReprogramAppointmentUseCase instance with its own unit of work."""
    container = get_container()
    return container.create_reprogram_appointment_use_case()


def get_transition_appointment_use_case() -> TransitionAppointmentUseCase:
    """Get TransitionAppointmentUseCase instance with its own unit of work."""
    container = get_container()
    return container.create_transition_appointment_use_case()


def get_appointment_use_case() -> GetAppointmentUseCase:
    """Get GetAppointmentUseCase instance with its own unit of work."""
    container = get_container()
    return container.create_get_appointment_use_case()


def get_register_slot_use_case() -> RegisterSlotUseCase:
    """Get RegisterSlotUseCase instance with its own unit of work."""
    container = get_container()
    return container.create_register_slot_use_case()


def get_soft_delete_slot_use_case() -> SoftDeleteSlotUseCase:
    """Get SoftDeleteSlotUseCase instance with its own unit of work."""
    container = get_container()
    return container.create_soft_delete_slot_use_case()


def get_restore_slot_use_case() -> RestoreSlotUseCase:
    """Get RestoreSlotUseCase instance with its own unit of work."""
    container = get_container()
    return container.create_restore_slot_use_case()


__all__ = [
    "get_availability_use_case",
    "get_book_appointment_use_case",
    "get_reprogram_appointment_use_case",
    "get_transition_appointment_use_case",
    "get_appointment_use_case",
    "get_register_slot_use_case",
    "get_soft_delete_slot_use_case",
    "get_restore_slot_use_case",
]
