# ============================================================================
# SCOPE: APPLICATION LAYER (Scheduling)
# Description: Use case for registering a practitioner's recurring slot.
# ============================================================================
"""Register Slot Use Case.

Validates the schedule windows, reuses existing windows with the same bounds
and keeps the practitioner's weekday grids disjoint.
"""

import logging

from agenda.core.domain import (
    EntityNotFoundException,
    SlotOverlapException,
    ValidationException,
    generate_uuid_str,
)

from ...domain.entities.recurring_slot import RecurringSlot
from ...domain.entities.schedule_window import ScheduleWindow
from ...domain.services.slot_overlap_service import SlotOverlapService
from ...domain.value_objects.hours import format_hour
from ..dto.scheduling_dtos import RegisterSlotRequest
from ..ports.unit_of_work import IUnitOfWork

logger = logging.getLogger(__name__)


async def ensure_no_overlap(
    uow: IUnitOfWork,
    service: SlotOverlapService,
    slot: RecurringSlot,
    windows: list[ScheduleWindow],
) -> None:
    """
    Compare ``slot`` with the other active slots of its practitioner and weekday.

    The practitioner row stays locked until the unit of work ends, so two
    registrations for the same practitioner cannot both pass the check.

    Raises:
        EntityNotFoundException: If the practitioner no longer exists
        SlotOverlapException: If any expanded time is shared
    """
    if not await uow.directory.lock_practitioner(slot.practitioner_id):
        raise EntityNotFoundException("Practitioner", slot.practitioner_id)

    existing = await uow.slots.find_by_practitioner_and_day(slot.practitioner_id, slot.day_of_week)
    schedule_ids = {schedule_id for other in existing for schedule_id in other.schedule_ids}
    windows_by_id = await uow.windows.find_by_ids(schedule_ids) if schedule_ids else {}
    pairs = [
        (other, [windows_by_id[i] for i in other.schedule_ids if i in windows_by_id])
        for other in existing
    ]

    overlap = service.find_overlap(slot, windows, pairs)
    if overlap is not None:
        raise SlotOverlapException(
            practitioner_id=slot.practitioner_id,
            day_of_week=slot.day_of_week.value,
            times=[format_hour(value) for value in overlap.times],
            conflicting_slot_id=overlap.conflicting_slot_id,
        )


class RegisterSlotUseCase:
    """Use case for registering a recurring slot."""

    def __init__(
        self,
        uow: IUnitOfWork,
        overlap_service: SlotOverlapService | None = None,
        default_duration_minutes: int = 30,
    ) -> None:
        """Initialize use case.

        Args:
            uow: Unit of work giving access to the repositories.
            overlap_service: Grid collision detection.
            default_duration_minutes: Duration used when the request omits one.
        """
        self._uow = uow
        self._service = overlap_service or SlotOverlapService()
        self._default_duration = default_duration_minutes

    async def execute(self, request: RegisterSlotRequest) -> RecurringSlot:
        """Execute the registration.

        Returns:
            The persisted slot with its schedule ids.

        Raises:
            ValidationException: No windows, inconsistent bounds or non-positive duration.
            EntityNotFoundException: Unknown practitioner, branch or location.
            SlotOverlapException: The grid collides with itself or another active slot.
        """
        duration = request.duration_minutes if request.duration_minutes is not None else self._default_duration
        if duration <= 0:
            raise ValidationException("duration_minutes must be greater than 0", field="duration_minutes")
        if not request.windows:
            raise ValidationException("At least one schedule window is required", field="windows")

        candidates = [
            ScheduleWindow(
                opening_hour=w.opening_hour,
                close_hour=w.close_hour,
                overtime_start_hour=w.overtime_start_hour,
            )
            for w in request.windows
        ]
        for candidate in candidates:
            candidate.validate()

        async with self._uow as uow:
            if not await uow.directory.practitioner_exists(request.practitioner_id):
                raise EntityNotFoundException("Practitioner", request.practitioner_id)
            if not await uow.directory.branch_exists(request.branch_id):
                raise EntityNotFoundException("Branch", request.branch_id)
            if request.location_id and not await uow.directory.location_exists(request.location_id):
                raise EntityNotFoundException("Location", request.location_id)

            windows = [await uow.windows.find_or_create(*candidate.bounds) for candidate in candidates]

            slot = RecurringSlot(
                id=generate_uuid_str(),
                practitioner_id=request.practitioner_id,
                branch_id=request.branch_id,
                location_id=request.location_id,
                day_of_week=request.day_of_week,
                duration_minutes=duration,
                unavailable=request.unavailable,
            )
            for window in windows:
                slot.attach_schedule(window.id or "")

            if slot.is_bookable():
                await ensure_no_overlap(uow, self._service, slot, windows)

            saved = await uow.slots.add(slot)
            await uow.commit()

        logger.info(
            f"Slot registered: {saved.id} for practitioner {saved.practitioner_id} on "
            f"{saved.day_of_week.value} ({', '.join(str(w) for w in windows)})"
        )
        return saved
