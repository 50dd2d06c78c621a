"""
Domain Layer - Core DDD building blocks

This module provides base classes for Domain-Driven Design:
- Entities: Objects with identity and lifecycle
- Value Objects: Immutable objects compared by value
- Exceptions: Domain-specific error handling
"""

from agenda.core.domain.entities import (
    AggregateRoot,
    Entity,
    SoftDeletableEntity,
    generate_uuid_str,
)
from agenda.core.domain.exceptions import (
    ConcurrentModificationException,
    DomainException,
    EntityNotFoundException,
    InvalidSlotAlignmentException,
    InvalidTransitionException,
    NoMatchingSlotException,
    SlotAlreadyTakenException,
    SlotOverlapException,
    ValidationException,
)
from agenda.core.domain.value_objects import StatusEnum, ValueObject

__all__ = [
    # Entities
    "Entity",
    "AggregateRoot",
    "SoftDeletableEntity",
    "generate_uuid_str",
    # Value Objects
    "ValueObject",
    "StatusEnum",
    # Exceptions
    "ConcurrentModificationException",
    "DomainException",
    "ValidationException",
    "EntityNotFoundException",
    "NoMatchingSlotException",
    "InvalidSlotAlignmentException",
    "SlotAlreadyTakenException",
    "InvalidTransitionException",
    "SlotOverlapException",
]
