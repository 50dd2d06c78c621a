"""
System clock in the configured scheduling timezone.
"""

from datetime import datetime
from zoneinfo import ZoneInfo

from agenda.domains.scheduling.application.ports.clock_port import IClock


class SystemClock(IClock):
    def __init__(self, timezone: ZoneInfo):
        self._timezone = timezone

    def now(self) -> datetime:
        """Wall-clock now in the scheduling timezone, without tzinfo."""
        return datetime.now(self._timezone).replace(tzinfo=None)
