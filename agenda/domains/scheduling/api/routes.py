"""
Scheduling API Routes

FastAPI router for availability, booking and recurring slot endpoints.
"""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from agenda.domains.scheduling.api.dependencies import (
    get_appointment_use_case,
    get_availability_use_case,
    get_book_appointment_use_case,
    get_register_slot_use_case,
    get_reprogram_appointment_use_case,
    get_restore_slot_use_case,
    get_soft_delete_slot_use_case,
    get_transition_appointment_use_case,
)
from agenda.domains.scheduling.api.schemas import (
    AppointmentResponse,
    AvailableDayResponse,
    BookAppointmentBody,
    RegisterSlotBody,
    ReprogramAppointmentBody,
    SlotResponse,
    TransitionAppointmentBody,
)
from agenda.domains.scheduling.application.dto import (
    GetAvailabilityRequest,
    TransitionAppointmentRequest,
)
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

router = APIRouter(prefix="/scheduling", tags=["Scheduling"])

# Type aliases for use case dependencies
GetAvailabilityUseCaseDep = Annotated[GetAvailabilityUseCase, Depends(get_availability_use_case)]
BookAppointmentUseCaseDep = Annotated[BookAppointmentUseCase, Depends(get_book_appointment_use_case)]
ReprogramAppointmentUseCaseDep = Annotated[
    ReprogramAppointmentUseCase, Depends(get_reprogram_appointment_use_case)
]
TransitionAppointmentUseCaseDep = Annotated[
    TransitionAppointmentUseCase, Depends(get_transition_appointment_use_case)
]
GetAppointmentUseCaseDep = Annotated[GetAppointmentUseCase, Depends(get_appointment_use_case)]
RegisterSlotUseCaseDep = Annotated[RegisterSlotUseCase, Depends(get_register_slot_use_case)]
SoftDeleteSlotUseCaseDep = Annotated[SoftDeleteSlotUseCase, Depends(get_soft_delete_slot_use_case)]
RestoreSlotUseCaseDep = Annotated[RestoreSlotUseCase, Depends(get_restore_slot_use_case)]


# =============================================================================
# Availability
# =============================================================================


@router.get("/practitioners/{practitioner_id}/availability", response_model=AvailableDayResponse)
async def get_availability(
    practitioner_id: UUID,
    use_case: GetAvailabilityUseCaseDep,
    target_date: Annotated[date | None, Query(alias="date", description="Defaults to today")] = None,
    appointment_type_id: Annotated[UUID | None, Query(description="Restrict to the hours of this type")] = None,
):
    """Get the bookable times of a practitioner on a date, today when omitted."""
    result = await use_case.execute(
        GetAvailabilityRequest(
            practitioner_id=str(practitioner_id),
            target_date=target_date,
            appointment_type_id=str(appointment_type_id) if appointment_type_id else None,
        )
    )
    return AvailableDayResponse.from_dto(result)


# =============================================================================
# Appointments
# =============================================================================


@router.post("/appointments", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    request: BookAppointmentBody,
    use_case: BookAppointmentUseCaseDep,
):
    """Book a new appointment, on an explicit slot or the first matching one."""
    appointment = await use_case.execute(request.to_request())
    return AppointmentResponse.from_entity(appointment)


@router.get("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: UUID,
    use_case: GetAppointmentUseCaseDep,
):
    """Get an appointment."""
    appointment = await use_case.execute(str(appointment_id))
    return AppointmentResponse.from_entity(appointment)


@router.post("/appointments/{appointment_id}/reprogram", response_model=AppointmentResponse)
async def reprogram_appointment(
    appointment_id: UUID,
    request: ReprogramAppointmentBody,
    use_case: ReprogramAppointmentUseCaseDep,
):
    """Move an appointment to another date and hour."""
    appointment = await use_case.execute(request.to_request(appointment_id))
    return AppointmentResponse.from_entity(appointment)


@router.post("/appointments/{appointment_id}/transition", response_model=AppointmentResponse)
async def transition_appointment(
    appointment_id: UUID,
    request: TransitionAppointmentBody,
    use_case: TransitionAppointmentUseCaseDep,
):
    """Change the status of an appointment."""
    appointment = await use_case.execute(
        TransitionAppointmentRequest(
            appointment_id=str(appointment_id),
            event=request.resolved_event(),
            reason=request.reason,
        )
    )
    return AppointmentResponse.from_entity(appointment)


# =============================================================================
# Recurring slots
# =============================================================================


@router.post("/slots", response_model=SlotResponse, status_code=status.HTTP_201_CREATED)
async def register_slot(
    request: RegisterSlotBody,
    use_case: RegisterSlotUseCaseDep,
):
    """Register a recurring slot with its schedule windows."""
    slot = await use_case.execute(request.to_request())
    return SlotResponse.from_entity(slot)


@router.delete("/slots/{slot_id}", response_model=SlotResponse)
async def soft_delete_slot(
    slot_id: UUID,
    use_case: SoftDeleteSlotUseCaseDep,
):
    """Soft delete a recurring slot; its appointments are kept."""
    slot = await use_case.execute(str(slot_id))
    return SlotResponse.from_entity(slot)


@router.post("/slots/{slot_id}/restore", response_model=SlotResponse)
async def restore_slot(
    slot_id: UUID,
    use_case: RestoreSlotUseCaseDep,
):
    """Restore a soft-deleted recurring slot."""
    slot = await use_case.execute(str(slot_id))
    return SlotResponse.from_entity(slot)
