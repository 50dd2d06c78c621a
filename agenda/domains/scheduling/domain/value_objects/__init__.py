"""
Scheduling Domain Value Objects

Immutable value objects for the scheduling domain.
"""

from agenda.domains.scheduling.domain.value_objects.appointment_status import (
    TRANSITIONS,
    AppointmentEvent,
    AppointmentStatus,
)
from agenda.domains.scheduling.domain.value_objects.booking_target import (
    AutoResolve,
    BookingTarget,
    ExplicitSlot,
)
from agenda.domains.scheduling.domain.value_objects.day_of_week import DayOfWeek
from agenda.domains.scheduling.domain.value_objects.hours import (
    format_hour,
    from_minutes,
    parse_hour,
    to_minutes,
)
from agenda.domains.scheduling.domain.value_objects.type_availability import TypeAvailability

__all__ = [
    "AppointmentStatus",
    "AppointmentEvent",
    "TRANSITIONS",
    "BookingTarget",
    "ExplicitSlot",
    "AutoResolve",
    "DayOfWeek",
    "parse_hour",
    "format_hour",
    "to_minutes",
    "from_minutes",
    "TypeAvailability",
]
