"""
Permission model.
"""

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Boolean, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rbac_api.core.auth.interfaces import PermissionAction

from .base import Base, StandardMixin

if TYPE_CHECKING:
    from .resource import Resource


class Permission(Base, StandardMixin):
    """A single action on a resource, e.g. ``update:articles``."""

    __tablename__ = "permissions"

    name: Mapped[str] = mapped_column(String(150), unique=True, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    action: Mapped[PermissionAction] = mapped_column(
        Enum(
            PermissionAction,
            name="permission_action",
            native_enum=False,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=PermissionAction.READ,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    resource_id: Mapped[UUID] = mapped_column(
        ForeignKey("resources.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    resource: Mapped["Resource"] = relationship(
        back_populates="permissions",
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<Permission {self.name}>"
