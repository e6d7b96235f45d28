"""
Database models.
"""

from .base import Base, SoftDeleteMixin, StandardMixin, TimestampMixin, UUIDMixin, utcnow
from .permission import Permission
from .resource import Resource
from .role import Role, role_permissions
from .user import User, user_roles

__all__ = [
    "Base",
    "SoftDeleteMixin",
    "StandardMixin",
    "TimestampMixin",
    "UUIDMixin",
    "utcnow",
    "User",
    "Role",
    "Permission",
    "Resource",
    "user_roles",
    "role_permissions",
]
