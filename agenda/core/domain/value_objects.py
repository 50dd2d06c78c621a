"""
Base value object classes.

Value objects are frozen dataclasses compared by value; subclasses check
their own fields in ``_validate``, which runs on construction.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Self


@dataclass(frozen=True)
class ValueObject:
    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Raise ValidationException on bad field values."""


class StatusEnum(str, Enum):
    """String enum whose members can be looked up ignoring case."""

    @classmethod
    def _missing_(cls, value: object) -> Self | None:
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Same as ``cls(value)``; raises ValueError for unknown values."""
        return cls(value)
