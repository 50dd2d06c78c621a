"""
Scheduling Domain Services
"""

from agenda.domains.scheduling.domain.services.availability_service import (
    AvailabilityService,
    GridCandidate,
    generate_grid,
)
from agenda.domains.scheduling.domain.services.slot_overlap_service import SlotOverlap, SlotOverlapService

__all__ = [
    "AvailabilityService",
    "GridCandidate",
    "generate_grid",
    "SlotOverlap",
    "SlotOverlapService",
]
