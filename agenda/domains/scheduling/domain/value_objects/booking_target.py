"""
Booking target value objects.

A booking either names the (slot, window) pair explicitly or asks the
engine to resolve it from practitioner, date and hour.
"""

from dataclasses import dataclass

from agenda.core.domain import ValidationException, ValueObject


@dataclass(frozen=True)
class ExplicitSlot(ValueObject):
    """Caller picked the recurring slot and the schedule window."""

    slot_id: str
    schedule_id: str

    def _validate(self) -> None:
        if not self.slot_id:
            raise ValidationException("slot_id is required", field="slot_id")
        if not self.schedule_id:
            raise ValidationException("schedule_id is required", field="schedule_id")


@dataclass(frozen=True)
class AutoResolve(ValueObject):
    """Engine picks the first available (slot, window) producing the hour."""


BookingTarget = ExplicitSlot | AutoResolve
