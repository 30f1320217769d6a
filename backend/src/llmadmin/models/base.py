"""
Base model class for the LLM admin backend.

This module provides the base model class with common functionality
for all database models.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.exc import MissingGreenlet
from sqlalchemy.orm import declarative_mixin

# Import Base from the database module to avoid duplicate declarations
from ..core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@declarative_mixin
class TimestampMixin:
    """Mixin for adding timestamp columns to models."""

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)


@declarative_mixin
class UidMixin:
    """Mixin for adding an auto-increment integer primary key."""

    uid = Column(Integer, primary_key=True, autoincrement=True)


class BaseModel(Base, TimestampMixin, UidMixin):
    """Base model class with common functionality."""

    __abstract__ = True

    def to_dict(self) -> dict:
        """Convert model to dictionary."""
        result = {}
        for attr in self.__mapper__.column_attrs:
            try:
                result[attr.key] = getattr(self, attr.key)
            except MissingGreenlet:
                result[attr.key] = None
        return result

    def __repr__(self) -> str:
        """Return string representation of the model."""
        return f"<{self.__class__.__name__}(uid={self.uid})>"
