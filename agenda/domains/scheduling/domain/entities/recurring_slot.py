"""
Recurring Slot Entity

Weekly availability of a practitioner on one weekday at one branch.
"""

from dataclasses import dataclass, field

from agenda.core.domain import AggregateRoot, SoftDeletableEntity

from ..value_objects.day_of_week import DayOfWeek


@dataclass(eq=False)
class RecurringSlot(AggregateRoot[str], SoftDeletableEntity[str]):
    """
    Recurring slot aggregate.

    Holds the ids of its schedule windows; the windows themselves are
    shared and looked up separately.

    Example:
        ```python
        slot = RecurringSlot(
            practitioner_id=practitioner_id,
            branch_id=branch_id,
            day_of_week=DayOfWeek.MONDAY,
            duration_minutes=30,
        )
        slot.attach_schedule(window.id)
        ```
    """

    practitioner_id: str = ""
    branch_id: str = ""
    location_id: str | None = None
    day_of_week: DayOfWeek = DayOfWeek.MONDAY
    duration_minutes: int = 30
    unavailable: bool = False
    schedule_ids: list[str] = field(default_factory=list)

    def is_bookable(self) -> bool:
        """Unavailable and soft-deleted slots never produce times."""
        return not self.unavailable and not self.is_deleted()

    def has_schedule(self, schedule_id: str) -> bool:
        return schedule_id in self.schedule_ids

    def attach_schedule(self, schedule_id: str) -> None:
        if schedule_id not in self.schedule_ids:
            self.schedule_ids.append(schedule_id)
            self.touch()
