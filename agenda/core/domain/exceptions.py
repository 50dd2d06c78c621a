"""
Scheduling errors.

Each exception carries a stable ``code`` and a ``details`` dict; the API maps
the code to an HTTP status and returns both unchanged.
"""

from typing import Any


class DomainException(Exception):
    code = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationException(DomainException):
    """Bad input caught by the domain: malformed hours, inconsistent windows, past dates."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        details = dict(details or {})
        if field:
            details["field"] = field
        super().__init__(message, details)
        self.field = field


class EntityNotFoundException(DomainException):
    code = "ENTITY_NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: Any, message: str | None = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            message or f"{entity_type} {entity_id} not found",
            {"entity_type": entity_type, "entity_id": str(entity_id)},
        )


class _PractitionerTimeException(DomainException):
    """An error about one practitioner's date and hour."""

    def __init__(self, message: str, practitioner_id: str, date: str, hour: str):
        self.practitioner_id = practitioner_id
        self.date = date
        self.hour = hour
        super().__init__(message, {"practitioner_id": practitioner_id, "date": date, "hour": hour})


class NoMatchingSlotException(_PractitionerTimeException):
    """No available slot produces the requested time."""

    code = "NO_MATCHING_SLOT"

    def __init__(self, practitioner_id: str, date: str, hour: str):
        super().__init__(
            f"No available slot for practitioner {practitioner_id} on {date} at {hour}",
            practitioner_id,
            date,
            hour,
        )


class SlotAlreadyTakenException(_PractitionerTimeException):
    """The practitioner already has an active appointment at that date and hour."""

    code = "SLOT_ALREADY_TAKEN"

    def __init__(self, practitioner_id: str, date: str, hour: str):
        super().__init__(
            f"Practitioner {practitioner_id} already has an appointment on {date} at {hour}",
            practitioner_id,
            date,
            hour,
        )


class InvalidSlotAlignmentException(DomainException):
    """
    The requested time does not fit the chosen slot and window.

    ``reason`` is a short machine-readable tag; ``nearest`` lists on-grid
    times close to the requested one, when there are any.
    """

    code = "INVALID_SLOT_ALIGNMENT"

    def __init__(self, reason: str, message: str | None = None, nearest: list[str] | None = None):
        self.reason = reason
        self.nearest = nearest or []
        details: dict[str, Any] = {"reason": reason}
        if nearest is not None:
            details["nearest"] = self.nearest
        super().__init__(message or f"Requested time is not aligned with the slot ({reason})", details)


class InvalidTransitionException(DomainException):
    code = "INVALID_TRANSITION"

    def __init__(self, current_state: str, event: str, allowed: list[str]):
        self.current_state = current_state
        self.event = event
        self.allowed = allowed
        super().__init__(
            f"Cannot apply '{event}' to an appointment in state '{current_state}'",
            {"current_state": current_state, "event": event, "allowed": allowed},
        )


class SlotOverlapException(DomainException):
    """A recurring slot definition collides with another one, or with itself."""

    code = "SLOT_OVERLAP"

    def __init__(
        self,
        practitioner_id: str,
        day_of_week: str,
        times: list[str],
        conflicting_slot_id: str | None = None,
    ):
        self.practitioner_id = practitioner_id
        self.day_of_week = day_of_week
        self.times = times
        self.conflicting_slot_id = conflicting_slot_id
        details: dict[str, Any] = {"practitioner_id": practitioner_id, "day_of_week": day_of_week, "times": times}
        if conflicting_slot_id:
            details["conflicting_slot_id"] = conflicting_slot_id
        super().__init__(
            f"Slot overlaps an existing schedule of practitioner {practitioner_id} on {day_of_week}",
            details,
        )


class ConcurrentModificationException(DomainException):
    """The row changed between this unit of work's read and its write."""

    code = "CONCURRENT_MODIFICATION"

    def __init__(self, entity_type: str, entity_id: Any):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            f"{entity_type} {entity_id} was modified by another request; reload and retry",
            {"entity_type": entity_type, "entity_id": str(entity_id)},
        )
