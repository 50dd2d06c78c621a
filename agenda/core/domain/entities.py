"""
Base entity classes.

Identity is the ``id`` string handed out by ``generate_uuid_str``; two
entities are the same when their ids match, whatever their other fields.
Timestamps are UTC and are informational only (appointment dates and hours
live in the application timezone).
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Generic, TypeVar
from uuid import uuid4

TId = TypeVar("TId")


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class Entity(Generic[TId]):
    id: TId | None = field(default=None)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity) or self.id is None or other.id is None:
            return False
        return type(self) is type(other) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id) if self.id is not None else id(self)

    def touch(self) -> None:
        self.updated_at = _utcnow()


@dataclass
class AggregateRoot(Entity[TId], Generic[TId]):
    """
    Entry point of a consistency boundary (an appointment, a recurring slot).

    ``version`` is bumped on every state change. For appointments it mirrors
    the row's version counter, and a write based on a stale read is rejected
    with ``ConcurrentModificationException``.
    """

    version: int = field(default=0)

    def increment_version(self) -> None:
        self.version += 1

    def mark_changed(self) -> None:
        """Bump the version and the update timestamp together."""
        self.increment_version()
        self.touch()


@dataclass
class SoftDeletableEntity(Entity[TId], Generic[TId]):
    """Deletion only sets ``deleted_at``; queries are expected to skip such rows."""

    deleted_at: datetime | None = field(default=None)

    def soft_delete(self) -> None:
        self.deleted_at = _utcnow()
        self.touch()

    def restore(self) -> None:
        self.deleted_at = None
        self.touch()

    def is_deleted(self) -> bool:
        return self.deleted_at is not None


def generate_uuid_str() -> str:
    return str(uuid4())
