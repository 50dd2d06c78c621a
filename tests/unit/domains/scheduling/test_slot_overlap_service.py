"""
Unit tests for recurring slot overlap detection.
"""

from datetime import time

import pytest

from agenda.domains.scheduling.domain.entities import RecurringSlot, ScheduleWindow
from agenda.domains.scheduling.domain.services import SlotOverlapService
from agenda.domains.scheduling.domain.value_objects import DayOfWeek

MORNING = ScheduleWindow(id="am", opening_hour=time(9, 0), close_hour=time(12, 0), overtime_start_hour=time(11, 0))
LATE_MORNING = ScheduleWindow(id="late", opening_hour=time(11, 30), close_hour=time(13, 0))
AFTERNOON = ScheduleWindow(id="pm", opening_hour=time(14, 0), close_hour=time(16, 0))


def _slot(slot_id: str, *window_ids: str, **kwargs) -> RecurringSlot:
    defaults = {"practitioner_id": "p1", "branch_id": "b1", "day_of_week": DayOfWeek.MONDAY}
    defaults.update(kwargs)
    return RecurringSlot(id=slot_id, schedule_ids=list(window_ids), **defaults)


@pytest.fixture
def service() -> SlotOverlapService:
    return SlotOverlapService()


@pytest.mark.unit
def test_disjoint_windows_do_not_overlap(service):
    existing = _slot("s1", "am")

    assert service.find_overlap(_slot("new", "pm"), [AFTERNOON], [(existing, [MORNING])]) is None


@pytest.mark.unit
def test_overtime_times_count_as_overlap(service):
    """11:30 is overtime in the existing slot and still collides."""
    existing = _slot("s1", "am")

    overlap = service.find_overlap(_slot("new", "late"), [LATE_MORNING], [(existing, [MORNING])])

    assert overlap is not None
    assert overlap.times == [time(11, 30)]
    assert overlap.conflicting_slot_id == "s1"


@pytest.mark.unit
def test_own_windows_intersecting_is_an_overlap(service):
    overlap = service.find_overlap(_slot("new", "am", "late"), [MORNING, LATE_MORNING], [])

    assert overlap is not None
    assert overlap.conflicting_slot_id is None
    assert overlap.times == [time(11, 30)]


@pytest.mark.unit
def test_unavailable_and_deleted_slots_are_ignored(service):
    unavailable = _slot("s1", "am", unavailable=True)
    deleted = _slot("s2", "am")
    deleted.soft_delete()

    overlap = service.find_overlap(_slot("new", "am"), [MORNING], [(unavailable, [MORNING]), (deleted, [MORNING])])

    assert overlap is None


@pytest.mark.unit
def test_slot_is_not_compared_with_itself(service):
    """Restoring a slot sees its own row among the existing ones."""
    slot = _slot("s1", "am")

    assert service.find_overlap(slot, [MORNING], [(slot, [MORNING])]) is None


@pytest.mark.unit
def test_other_practitioner_or_day_is_ignored(service):
    other_practitioner = _slot("s1", "am", practitioner_id="p2")
    other_day = _slot("s2", "am", day_of_week=DayOfWeek.TUESDAY)

    overlap = service.find_overlap(
        _slot("new", "am"), [MORNING], [(other_practitioner, [MORNING]), (other_day, [MORNING])]
    )

    assert overlap is None


@pytest.mark.unit
def test_different_durations_overlap_only_on_shared_times(service):
    """20 and 30 minute grids from 09:00 share 09:00, 10:00 and 11:00."""
    existing = _slot("s1", "am", duration_minutes=20)

    overlap = service.find_overlap(_slot("new", "am", duration_minutes=30), [MORNING], [(existing, [MORNING])])

    assert overlap.times == [time(9, 0), time(10, 0), time(11, 0)]
