"""
Appointment Status Value Objects

Lifecycle states of a booked appointment and the explicit transition table
that governs them.
"""

from agenda.core.domain import InvalidTransitionException, StatusEnum


class AppointmentStatus(StatusEnum):
    """
    Appointment lifecycle states.

    Valid transitions:
    - PENDING -> APPROVED, UNDER_REVIEW, CANCELLED
    - APPROVED -> COMPLETED, NO_SHOW, CANCELLED
    - UNDER_REVIEW -> APPROVED, CANCELLED
    - COMPLETED, NO_SHOW, CANCELLED -> (terminal)
    """

    PENDING = "pending"
    APPROVED = "approved"
    UNDER_REVIEW = "under_review"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"

    def is_terminal(self) -> bool:
        """Check if no further transition is possible."""
        return not self.allowed_events()

    def is_active(self) -> bool:
        """Active appointments hold their practitioner, date and hour."""
        return self is not AppointmentStatus.CANCELLED

    def allowed_events(self) -> list["AppointmentEvent"]:
        return [event for (state, event) in TRANSITIONS if state is self]

    def can_transition_to(self, new_status: "AppointmentStatus") -> bool:
        return new_status in {target for (state, _), target in TRANSITIONS.items() if state is self}

    def apply(self, event: "AppointmentEvent") -> "AppointmentStatus":
        """
        Resolve the state reached by applying ``event``.

        Raises:
            InvalidTransitionException: If the pair is not in the table
        """
        target = TRANSITIONS.get((self, event))
        if target is None:
            raise InvalidTransitionException(
                current_state=self.value,
                event=event.value,
                allowed=[e.value for e in self.allowed_events()],
            )
        return target


class AppointmentEvent(StatusEnum):
    """Externally triggered events that move an appointment between states."""

    APPROVE = "approve"
    SEND_TO_REVIEW = "send_to_review"
    CANCEL = "cancel"
    COMPLETE = "complete"
    MARK_NO_SHOW = "mark_no_show"

    @classmethod
    def for_target(cls, target: AppointmentStatus) -> "AppointmentEvent":
        """
        Get the event that leads to ``target``.

        Raises:
            ValueError: If no event leads to that status
        """
        event = _EVENT_BY_TARGET.get(target)
        if event is None:
            raise ValueError(f"No event leads to status {target.value}")
        return event


TRANSITIONS: dict[tuple[AppointmentStatus, AppointmentEvent], AppointmentStatus] = {
    (AppointmentStatus.PENDING, AppointmentEvent.APPROVE): AppointmentStatus.APPROVED,
    (AppointmentStatus.PENDING, AppointmentEvent.SEND_TO_REVIEW): AppointmentStatus.UNDER_REVIEW,
    (AppointmentStatus.PENDING, AppointmentEvent.CANCEL): AppointmentStatus.CANCELLED,
    (AppointmentStatus.APPROVED, AppointmentEvent.COMPLETE): AppointmentStatus.COMPLETED,
    (AppointmentStatus.APPROVED, AppointmentEvent.MARK_NO_SHOW): AppointmentStatus.NO_SHOW,
    (AppointmentStatus.APPROVED, AppointmentEvent.CANCEL): AppointmentStatus.CANCELLED,
    (AppointmentStatus.UNDER_REVIEW, AppointmentEvent.APPROVE): AppointmentStatus.APPROVED,
    (AppointmentStatus.UNDER_REVIEW, AppointmentEvent.CANCEL): AppointmentStatus.CANCELLED,
}

_EVENT_BY_TARGET: dict[AppointmentStatus, AppointmentEvent] = {
    AppointmentStatus.APPROVED: AppointmentEvent.APPROVE,
    AppointmentStatus.UNDER_REVIEW: AppointmentEvent.SEND_TO_REVIEW,
    AppointmentStatus.CANCELLED: AppointmentEvent.CANCEL,
    AppointmentStatus.COMPLETED: AppointmentEvent.COMPLETE,
    AppointmentStatus.NO_SHOW: AppointmentEvent.MARK_NO_SHOW,
}
