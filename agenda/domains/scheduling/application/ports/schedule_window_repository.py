"""
Schedule Window Repository Port
"""

from collections.abc import Iterable
from datetime import time
from typing import Protocol, runtime_checkable

from agenda.domains.scheduling.domain.entities.schedule_window import ScheduleWindow


@runtime_checkable
class IScheduleWindowRepository(Protocol):
    """
    Schedule window repository interface.

    Windows are shared and unique by their (opening, close, overtime) triple.
    """

    async def find_by_ids(self, schedule_ids: Iterable[str]) -> dict[str, ScheduleWindow]:
        """
        Load windows by id.

        Returns:
            Mapping of id to window; unknown ids are absent
        """
        ...

    async def find_or_create(
        self,
        opening_hour: time,
        close_hour: time,
        overtime_start_hour: time | None = None,
    ) -> ScheduleWindow:
        """
        Return the window with these bounds, creating it when missing.

        Returns:
            Existing or newly created window
        """
        ...
