"""
Scheduling SQLAlchemy persistence.
"""

from agenda.domains.scheduling.infrastructure.persistence.sqlalchemy.models import (
    AppointmentModel,
    BranchModel,
    LocationModel,
    PatientModel,
    PractitionerModel,
    RecurringSlotModel,
    ScheduleWindowModel,
    recurring_slot_windows,
)

__all__ = [
    "PractitionerModel",
    "PatientModel",
    "BranchModel",
    "LocationModel",
    "ScheduleWindowModel",
    "RecurringSlotModel",
    "recurring_slot_windows",
    "AppointmentModel",
]
