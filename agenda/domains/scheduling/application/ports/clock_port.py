"""
Clock Port
"""

from datetime import datetime
from typing import Protocol, runtime_checkable


@runtime_checkable
class IClock(Protocol):
    """Source of the current wall-clock time in the configured timezone."""

    def now(self) -> datetime:
        """Naive datetime, local to the scheduling timezone."""
        ...
