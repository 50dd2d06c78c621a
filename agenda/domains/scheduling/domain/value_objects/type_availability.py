"""
Appointment type availability value object.

An appointment type may only be given within certain hours of certain
weekdays; those hours narrow every schedule window of the same weekday.
"""

from dataclasses import dataclass
from datetime import time

from agenda.core.domain import ValueObject
from agenda.domains.scheduling.domain.value_objects.day_of_week import DayOfWeek


@dataclass(frozen=True)
class TypeAvailability(ValueObject):
    day_of_week: DayOfWeek
    start_time: time
    end_time: time

    @staticmethod
    def for_day(availabilities: list["TypeAvailability"], day: DayOfWeek) -> "TypeAvailability | None":
        """First availability declared for ``day``."""
        return next((a for a in availabilities if a.day_of_week == day), None)
