"""
Base model classes and mixins.

- UUIDMixin: portable UUID primary key (Postgres and SQLite)
- TimestampMixin: created_at, updated_at in UTC
- SoftDeleteMixin: deleted_at tombstone (users only)
- StandardMixin: both of the first two, used by every table
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base shared by the identity tables."""

    # All datetimes are timezone-aware
    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }


class UUIDMixin:
    """UUID primary key, generated client-side."""

    id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )


# ============================================================
# TIMESTAMP MIXIN
# ============================================================

class TimestampMixin:
    """created_at and updated_at, set client-side in UTC with a server fallback."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )


# ============================================================
# SOFT DELETE MIXIN
# ============================================================

class SoftDeleteMixin:
    """
    Tombstone column for soft deletion.

    Tombstoned rows stay in the table. Repositories must
    filter on deleted_at for every read path.

    Usage:
        record.deleted_at = utcnow()

        # Query non-deleted
        select(User).where(User.deleted_at.is_(None))
    """

    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
        index=True,
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class StandardMixin(UUIDMixin, TimestampMixin):
    """UUID primary key plus timestamps."""
    pass
