"""
Day of week value object.

Recurring slots are bound to a symbolic weekday; calendar dates are
mapped onto it with a pure function.
"""

from datetime import date

from agenda.core.domain import StatusEnum


class DayOfWeek(StatusEnum):
    """Symbolic weekday, SUNDAY .. SATURDAY."""

    SUNDAY = "SUNDAY"
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"

    @classmethod
    def from_date(cls, value: date) -> "DayOfWeek":
        """Get the weekday of a calendar date."""
        # isoweekday(): Monday == 1 .. Sunday == 7
        return _BY_ISO_WEEKDAY[value.isoweekday()]


_BY_ISO_WEEKDAY: dict[int, DayOfWeek] = {
    1: DayOfWeek.MONDAY,
    2: DayOfWeek.TUESDAY,
    3: DayOfWeek.WEDNESDAY,
    4: DayOfWeek.THURSDAY,
    5: DayOfWeek.FRIDAY,
    6: DayOfWeek.SATURDAY,
    7: DayOfWeek.SUNDAY,
}
