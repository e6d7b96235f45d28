"""
Resource model.
"""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, StandardMixin

if TYPE_CHECKING:
    from .permission import Permission


class Resource(Base, StandardMixin):
    """Something permissions are granted on. Owns its permissions."""

    __tablename__ = "resources"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Deleting a resource deletes its permissions (FK cascade does the work)
    permissions: Mapped[list["Permission"]] = relationship(
        back_populates="resource",
        lazy="raise",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Resource {self.name}>"
