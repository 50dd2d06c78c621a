"""
Slot Overlap Service

Detects recurring slot definitions whose expanded grids share a time.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import time

from ..entities.recurring_slot import RecurringSlot
from ..entities.schedule_window import ScheduleWindow
from .availability_service import generate_grid


@dataclass(frozen=True)
class SlotOverlap:
    """Times shared by a candidate slot and an existing one (or itself)."""

    times: list[time]
    conflicting_slot_id: str | None = None


class SlotOverlapService:
    """
    Domain service that keeps one practitioner's weekday grids disjoint.

    Overtime candidates count; unavailable and soft-deleted slots do not.
    """

    def grid_of(self, slot: RecurringSlot, windows: Iterable[ScheduleWindow]) -> list[time]:
        return [value for window in windows for value, _ in generate_grid(window, slot.duration_minutes)]

    def find_overlap(
        self,
        slot: RecurringSlot,
        windows: list[ScheduleWindow],
        existing: Iterable[tuple[RecurringSlot, list[ScheduleWindow]]],
    ) -> SlotOverlap | None:
        """
        Find the first collision of ``slot`` with itself or an existing slot.

        Args:
            slot: Slot being registered or restored
            windows: Windows attached to ``slot``
            existing: Other slots of the same practitioner and weekday, with
                their windows

        Returns:
            The collision, or None when the grids are disjoint
        """
        own: set[time] = set()
        repeated: set[time] = set()
        for value in self.grid_of(slot, windows):
            if value in own:
                repeated.add(value)
            own.add(value)
        if repeated:
            return SlotOverlap(times=sorted(repeated))

        for other, other_windows in existing:
            if other.id == slot.id or not other.is_bookable():
                continue
            if other.practitioner_id != slot.practitioner_id or other.day_of_week != slot.day_of_week:
                continue
            shared = own.intersection(self.grid_of(other, other_windows))
            if shared:
                return SlotOverlap(times=sorted(shared), conflicting_slot_id=other.id)

        return None
