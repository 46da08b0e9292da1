"""
Base class and audit mixins for all SQLAlchemy ORM models.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def new_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class UUIDPrimaryKeyMixin:
    """String UUID primary key generated by the service."""

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)


class TimestampMixin:
    """created_at / updated_at maintained on the Python side."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )


class SoftDeleteMixin(TimestampMixin):
    """
    Soft delete and audit trail fields.

    Fields added:
    - deleted_at: set when the row is soft-deleted (None = live)
    - created_by, updated_by, deleted_by: opaque actor ids supplied by callers

    Models with an active flag override deactivate() and active_clause().
    Repositories hide rows with deleted_at set by default.
    """

    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    created_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    updated_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    deleted_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    @classmethod
    def active_clause(cls) -> Any | None:
        """SQL predicate for "active" rows used by list/search, or None."""
        return None

    def deactivate(self) -> None:
        """Turn the model's active flag off. No-op for models without one."""

    def soft_delete(self, actor: str | None) -> None:
        """Mark the row deleted and inactive."""
        self.deactivate()
        self.deleted_at = utcnow()
        self.deleted_by = actor

    def set_created_by(self, actor: str | None) -> None:
        self.created_by = actor

    def set_updated_by(self, actor: str | None) -> None:
        self.updated_by = actor
        self.updated_at = utcnow()

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        state = "deleted" if self.is_deleted else "live"
        return f"<{class_name}(id={getattr(self, 'id', None)}, {state})>"
