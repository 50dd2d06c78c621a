"""
Availability Service for Scheduling Domain

Expands recurring slots and their schedule windows into the bookable
times of one calendar date.
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date, datetime, time

from agenda.core.domain import InvalidSlotAlignmentException

from ..entities.recurring_slot import RecurringSlot
from ..entities.schedule_window import ScheduleWindow
from ..value_objects.day_of_week import DayOfWeek
from ..value_objects.hours import format_hour, from_minutes, to_minutes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GridCandidate:
    """One bookable time produced by a (slot, window) pair."""

    time: time
    slot_id: str
    schedule_id: str
    is_overtime: bool = False


def generate_grid(window: ScheduleWindow, duration_minutes: int) -> Iterator[tuple[time, bool]]:
    """
    Lazily yield ``(time, is_overtime)`` from opening, stepping by duration,
    strictly before close.

    Inconsistent windows (close at or before opening) and non-positive
    durations yield nothing.
    """
    if duration_minutes <= 0 or not window.is_consistent():
        logger.warning(
            f"Schedule window {window.id} ({window}) with duration {duration_minutes} "
            f"produces no times"
        )
        return

    current = to_minutes(window.opening_hour)
    close = to_minutes(window.close_hour)
    while current < close:
        value = from_minutes(current)
        yield value, window.is_overtime(value)
        current += duration_minutes


class AvailabilityService:
    """
    Domain service for availability resolution.

    Handles:
    - Grid expansion of (slot, window) pairs
    - Removal of booked and past times
    - Alignment checks for explicit bookings

    Example:
        ```python
        service = AvailabilityService()
        available = service.resolve(
            slots=slots,
            windows_by_id={w.id: w for w in windows},
            booked=[time(9, 30)],
            target_date=date(2099, 1, 5),
            now=datetime(2099, 1, 1, 8, 0),
        )
        ```
    """

    def iter_candidates(
        self,
        slots: Iterable[RecurringSlot],
        windows_by_id: dict[str, ScheduleWindow],
        within: tuple[time, time] | None = None,
    ) -> Iterator[GridCandidate]:
        """
        Yield every candidate in slot-then-window order, overtime included.

        With ``within``, each window is first narrowed to that range and the
        grid starts at the narrowed opening.
        """
        for slot in slots:
            if not slot.is_bookable():
                continue
            for window in self._windows_of(slot, windows_by_id, within):
                for value, is_overtime in generate_grid(window, slot.duration_minutes):
                    yield GridCandidate(
                        time=value,
                        slot_id=slot.id or "",
                        schedule_id=window.id or "",
                        is_overtime=is_overtime,
                    )

    def resolve(
        self,
        slots: Iterable[RecurringSlot],
        windows_by_id: dict[str, ScheduleWindow],
        booked: Iterable[time],
        target_date: date,
        now: datetime | None = None,
        within: tuple[time, time] | None = None,
    ) -> list[GridCandidate]:
        """
        Compute the available times of ``target_date``.

        Overtime candidates and exact matches of ``booked`` are dropped.
        When ``now`` is given, candidates starting before it are dropped too.
        Duplicate times keep the first source.

        Args:
            slots: Slots of the practitioner for the weekday of the date
            windows_by_id: Lookup of the windows attached to those slots
            booked: Hours of the non-cancelled appointments on that date
            target_date: Calendar date being queried
            now: Current wall-clock time in the configured timezone
            within: Hours allowed for the appointment type on that weekday

        Returns:
            Available candidates, ``is_overtime`` always false
        """
        taken = set(booked)
        seen: set[time] = set()
        available: list[GridCandidate] = []

        for candidate in self.iter_candidates(slots, windows_by_id, within):
            if candidate.is_overtime:
                continue
            if candidate.time in taken or candidate.time in seen:
                continue
            if now is not None and datetime.combine(target_date, candidate.time) < now:
                continue
            seen.add(candidate.time)
            available.append(candidate)

        return available

    def is_on_grid(self, slot: RecurringSlot, window: ScheduleWindow, hour: time) -> bool:
        """Check that ``hour`` is a regular (non-overtime) candidate of the pair."""
        return any(
            value == hour and not is_overtime
            for value, is_overtime in generate_grid(window, slot.duration_minutes)
        )

    def nearest(self, slot: RecurringSlot, window: ScheduleWindow, hour: time, limit: int) -> list[str]:
        """Regular candidates of the pair closest to ``hour``, as ``HH:MM``."""
        if limit <= 0:
            return []
        target = to_minutes(hour)
        regular = [value for value, is_overtime in generate_grid(window, slot.duration_minutes) if not is_overtime]
        regular.sort(key=lambda value: (abs(to_minutes(value) - target), value))
        return [format_hour(value) for value in sorted(regular[:limit])]

    def check_alignment(
        self,
        slot: RecurringSlot,
        window: ScheduleWindow,
        practitioner_id: str,
        target_date: date,
        hour: time,
        suggestions: int = 3,
    ) -> None:
        """
        Verify that an explicitly chosen (slot, window) pair can host ``hour``
        on ``target_date`` for ``practitioner_id``.

        Raises:
            InvalidSlotAlignmentException: With a ``reason`` tag, and the
                nearest regular times when the hour is off grid or in overtime
        """
        if slot.practitioner_id != practitioner_id:
            raise InvalidSlotAlignmentException(
                "practitioner_mismatch",
                f"Slot {slot.id} does not belong to practitioner {practitioner_id}",
            )
        if not slot.has_schedule(window.id or ""):
            raise InvalidSlotAlignmentException(
                "schedule_not_attached",
                f"Schedule window {window.id} is not attached to slot {slot.id}",
            )
        requested_day = DayOfWeek.from_date(target_date)
        if slot.day_of_week != requested_day:
            raise InvalidSlotAlignmentException(
                "day_mismatch",
                f"Slot {slot.id} is for {slot.day_of_week.value}, not {requested_day.value}",
            )
        if slot.unavailable:
            raise InvalidSlotAlignmentException("slot_unavailable", f"Slot {slot.id} is marked unavailable")
        if self.is_on_grid(slot, window, hour):
            return

        nearest = self.nearest(slot, window, hour, suggestions)
        if window.is_overtime(hour) and window.opening_hour <= hour < window.close_hour:
            raise InvalidSlotAlignmentException(
                "overtime",
                f"{format_hour(hour)} falls in the overtime of window {window}",
                nearest=nearest,
            )
        raise InvalidSlotAlignmentException(
            "off_grid",
            f"{format_hour(hour)} is not a start time of window {window} "
            f"every {slot.duration_minutes} minutes",
            nearest=nearest,
        )

    @staticmethod
    def _windows_of(
        slot: RecurringSlot,
        windows_by_id: dict[str, ScheduleWindow],
        within: tuple[time, time] | None = None,
    ) -> list[ScheduleWindow]:
        windows = []
        for schedule_id in slot.schedule_ids:
            window = windows_by_id.get(schedule_id)
            if window is None:
                logger.warning(f"Slot {slot.id} references missing schedule window {schedule_id}")
                continue
            if within is not None:
                window = window.clipped(*within)
                if window is None:
                    continue
            windows.append(window)
        return sorted(windows, key=lambda w: w.opening_hour)
