"""
Defines the base model for SQLAlchemy ORM with common attributes.

This module provides the declarative base and an abstract model class with
the standard identity and timestamp columns, an explicit mass-assignment
allow-list, and a soft-delete mixin used by entities that are hidden rather
than removed when deleted.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class BaseModel(Base):
    """
    Base model class for database entities.

    This abstract base model class serves as the foundation for all database
    entities, providing standard fields for consistent identification and
    tracking of record creation and modification timestamps.

    Subclasses list the attributes that may be copied from untrusted input in
    ``fillable``. Anything not listed there (for example ``User.is_admin``)
    can only be set by assigning the attribute explicitly.

    :ivar id: Unique identifier for the record.
    :type id: int
    :ivar created_at: Timestamp representing when the record was created.
    :type created_at: datetime
    :ivar updated_at: Timestamp representing when the record was last updated.
    :type updated_at: datetime
    """

    __abstract__ = True

    fillable: tuple[str, ...] = ()

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def fill(self, data: dict[str, Any]) -> "BaseModel":
        """Copy allow-listed keys from ``data`` onto the instance.

        Keys outside ``fillable`` are ignored silently, mirroring how guarded
        attributes are dropped from bulk input.
        """
        for field, value in data.items():
            if field in self.fillable:
                setattr(self, field, value)
        return self

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={self.id})>"


class SoftDeleteMixin:
    """Adds a ``deleted_at`` marker and helpers for soft deletion."""

    deleted_at = Column(DateTime, nullable=True, index=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self) -> bool:
        """Mark the record deleted. Returns False if it already was."""
        if self.deleted_at is not None:
            return False
        self.deleted_at = datetime.utcnow()
        return True

    def restore(self) -> bool:
        """Clear the deletion marker. Returns False if it was not deleted."""
        if self.deleted_at is None:
            return False
        self.deleted_at = None
        return True

    @classmethod
    def active(cls):
        """SQL predicate selecting rows that are not soft-deleted."""
        return cls.deleted_at.is_(None)
