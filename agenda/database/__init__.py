"""
Database package: declarative base, async engine and session factories.
"""

from agenda.database.base import Base, TimestampMixin

__all__ = ["Base", "TimestampMixin"]
