"""
Schedule Window Entity

Opening / closing hours, plus an optional overtime start, shared by any
number of recurring slots.
"""

from dataclasses import dataclass, replace
from datetime import time

from agenda.core.domain import Entity, ValidationException

from ..value_objects.hours import format_hour


@dataclass(eq=False)
class ScheduleWindow(Entity[str]):
    """
    Wall-clock window of a recurring slot.

    The (opening, close, overtime) triple is unique system-wide and the
    window is never changed once a slot references it.
    """

    opening_hour: time = time(0, 0)
    close_hour: time = time(0, 0)
    overtime_start_hour: time | None = None

    @property
    def bounds(self) -> tuple[time, time, time | None]:
        return (self.opening_hour, self.close_hour, self.overtime_start_hour)

    def is_consistent(self) -> bool:
        """A window with close at or before opening produces no times."""
        return self.close_hour > self.opening_hour

    def is_overtime(self, value: time) -> bool:
        return self.overtime_start_hour is not None and value >= self.overtime_start_hour

    def clipped(self, start: time, end: time) -> "ScheduleWindow | None":
        """
        Same window narrowed to ``[start, end)``, keeping its id and overtime
        start; None when the two ranges do not overlap.
        """
        opening = max(self.opening_hour, start)
        close = min(self.close_hour, end)
        if opening >= close:
            return None
        return replace(self, opening_hour=opening, close_hour=close)

    def validate(self) -> None:
        """
        Check the bounds before a window is created.

        Raises:
            ValidationException: If opening is not before close, or overtime
                start is not strictly between them
        """
        if not self.is_consistent():
            raise ValidationException(
                f"Opening hour {format_hour(self.opening_hour)} must be before "
                f"closing hour {format_hour(self.close_hour)}",
                field="close_hour",
            )
        if self.overtime_start_hour is not None and not (
            self.opening_hour < self.overtime_start_hour < self.close_hour
        ):
            raise ValidationException(
                f"Overtime start {format_hour(self.overtime_start_hour)} must be between "
                f"{format_hour(self.opening_hour)} and {format_hour(self.close_hour)}",
                field="overtime_start_hour",
            )

    def __str__(self) -> str:
        overtime = f" (overtime {format_hour(self.overtime_start_hour)})" if self.overtime_start_hour else ""
        return f"{format_hour(self.opening_hour)} - {format_hour(self.close_hour)}{overtime}"
