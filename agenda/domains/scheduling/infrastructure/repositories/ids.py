"""
Identifier helpers for the PostgreSQL UUID columns.
"""

from uuid import UUID

from sqlalchemy.exc import IntegrityError


def is_valid_uuid(value: str | None) -> bool:
    """Ids that are not UUIDs can never match a row."""
    if not value:
        return False
    try:
        UUID(str(value))
    except ValueError:
        return False
    return True


def is_unique_violation(error: IntegrityError, constraint: str | None = None) -> bool:
    """
    Whether ``error`` is a unique violation; when ``constraint`` is given,
    only a violation of that constraint counts (a primary key clash does not).
    """
    message = str(error).lower()
    if constraint:
        return constraint.lower() in message
    return "unique constraint" in message or "duplicate key" in message
