"""
Base class and mixins for all SQLAlchemy ORM models.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Display order of the first item of every ordered collection
ORDER_BASE = 0


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class EntityMixin:
    """
    Opaque string identifier plus audit timestamps.

    ``updated_at`` is touched by the services on every write; callers never
    supply either timestamp.
    """

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), nullable=True
    )

    def touch(self) -> None:
        self.updated_at = utcnow()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"


class OrderedMixin:
    """
    Display position inside a collection.

    Among the non-deleted items of one collection the values are exactly
    ORDER_BASE .. ORDER_BASE + n - 1. The ordering service is the only writer.
    """

    order: Mapped[int] = mapped_column(Integer, default=ORDER_BASE, nullable=False, index=True)


class SoftDeleteMixin:
    """
    Soft delete fields.

    Invariants:
    - is_deleted is True exactly when deleted_at is set
    - a deleted record is never active (for models that have ``is_active``)
    """

    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    @classmethod
    def has_active_flag(cls) -> bool:
        return hasattr(cls, "is_active")

    def soft_delete(self) -> None:
        """Mark as deleted and force the record out of public view."""
        self.is_deleted = True
        self.deleted_at = utcnow()
        if self.has_active_flag():
            self.is_active = False

    def restore(self) -> None:
        """
        Clear the deletion marks.

        ``is_active`` is left untouched: re-publishing a restored record is
        an explicit, separate decision.
        """
        self.is_deleted = False
        self.deleted_at = None

    def __repr__(self) -> str:
        state = "deleted" if self.is_deleted else "live"
        return f"<{self.__class__.__name__}(id={getattr(self, 'id', None)}, {state})>"
