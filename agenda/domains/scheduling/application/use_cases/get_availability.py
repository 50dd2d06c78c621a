# ============================================================================
# SCOPE: APPLICATION LAYER (Scheduling)
# Description: Use case for the available times of a practitioner on a date.
# ============================================================================
"""Get Availability Use Case.

Side-effect-free read: expands the practitioner's recurring slots for the
weekday of the requested date and removes booked and past times. An
appointment type narrows every window to the hours the type may be given
on that weekday.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time

from agenda.core.domain import EntityNotFoundException

from ...domain.entities.recurring_slot import RecurringSlot
from ...domain.entities.schedule_window import ScheduleWindow
from ...domain.services.availability_service import AvailabilityService, GridCandidate
from ...domain.value_objects.day_of_week import DayOfWeek
from ...domain.value_objects.hours import format_hour
from ...domain.value_objects.type_availability import TypeAvailability
from ..dto.scheduling_dtos import AvailableDayDTO, AvailableTimeDTO, GetAvailabilityRequest
from ..ports.clock_port import IClock
from ..ports.unit_of_work import IUnitOfWork

logger = logging.getLogger(__name__)


@dataclass
class DaySchedule:
    """Everything loaded to resolve one practitioner's day."""

    slots: list[RecurringSlot]
    windows_by_id: dict[str, ScheduleWindow]
    booked: list[time]
    available: list[GridCandidate]

    def slot(self, slot_id: str) -> RecurringSlot:
        return next(s for s in self.slots if s.id == slot_id)


async def load_day_schedule(
    uow: IUnitOfWork,
    service: AvailabilityService,
    practitioner_id: str,
    target_date: date,
    now: datetime | None,
    within: tuple[time, time] | None = None,
) -> DaySchedule:
    """Load slots, windows and booked hours inside an open unit of work and resolve them."""
    day_of_week = DayOfWeek.from_date(target_date)
    slots = await uow.slots.find_by_practitioner_and_day(practitioner_id, day_of_week)
    schedule_ids = {schedule_id for slot in slots for schedule_id in slot.schedule_ids}
    windows_by_id = await uow.windows.find_by_ids(schedule_ids) if schedule_ids else {}
    booked = await uow.appointments.find_booked_hours(practitioner_id, target_date)

    available = service.resolve(
        slots=slots,
        windows_by_id=windows_by_id,
        booked=booked,
        target_date=target_date,
        now=now,
        within=within,
    )
    return DaySchedule(slots=slots, windows_by_id=windows_by_id, booked=booked, available=available)


class GetAvailabilityUseCase:
    """Use case for computing a practitioner's available day.

    Repeated calls without intervening bookings return the same result.
    """

    def __init__(
        self,
        uow: IUnitOfWork,
        clock: IClock,
        availability_service: AvailabilityService | None = None,
    ) -> None:
        """Initialize use case.

        Args:
            uow: Unit of work giving access to the repositories.
            clock: Current time in the scheduling timezone.
            availability_service: Grid resolution service.
        """
        self._uow = uow
        self._clock = clock
        self._service = availability_service or AvailabilityService()

    async def execute(self, request: GetAvailabilityRequest) -> AvailableDayDTO:
        """Execute the availability query.

        Args:
            request: Practitioner, date (today when omitted) and optional
                appointment type.

        Returns:
            AvailableDayDTO with available entries and booked hours. Empty
            when the appointment type is not given on that weekday.

        Raises:
            EntityNotFoundException: If the practitioner or the appointment
                type does not exist.
        """
        now = self._clock.now()
        target_date = request.target_date or now.date()

        async with self._uow as uow:
            if not await uow.directory.practitioner_exists(request.practitioner_id):
                raise EntityNotFoundException("Practitioner", request.practitioner_id)

            within = None
            if request.appointment_type_id is not None:
                availabilities = await uow.directory.find_type_availabilities(request.appointment_type_id)
                if availabilities is None:
                    raise EntityNotFoundException("AppointmentType", request.appointment_type_id)
                if availabilities:
                    allowed = TypeAvailability.for_day(availabilities, DayOfWeek.from_date(target_date))
                    if allowed is None:
                        logger.debug(
                            f"Appointment type {request.appointment_type_id} is not given on "
                            f"{DayOfWeek.from_date(target_date).value}"
                        )
                        return AvailableDayDTO(date=target_date.isoformat(), available=[], booked=[])
                    within = (allowed.start_time, allowed.end_time)

            day = await load_day_schedule(
                uow,
                self._service,
                request.practitioner_id,
                target_date,
                now,
                within,
            )

        logger.debug(
            f"Availability for practitioner {request.practitioner_id} on {target_date}: "
            f"{len(day.available)} available, {len(day.booked)} booked"
        )

        return AvailableDayDTO(
            date=target_date.isoformat(),
            available=[
                AvailableTimeDTO(
                    time=format_hour(candidate.time),
                    slot_id=candidate.slot_id,
                    schedule_id=candidate.schedule_id,
                    is_overtime=candidate.is_overtime,
                )
                for candidate in day.available
            ],
            booked=[format_hour(hour) for hour in day.booked],
        )
