"""
Data access layer.
"""

from .base import BaseRepository, translate_db_errors
from .permissions import PermissionRepository
from .resources import ResourceRepository
from .roles import RoleRepository
from .store import IdentityStore, IdentityTransaction
from .users import UserRepository, build_principal, normalize_email

__all__ = [
    "BaseRepository",
    "IdentityStore",
    "IdentityTransaction",
    "PermissionRepository",
    "ResourceRepository",
    "RoleRepository",
    "UserRepository",
    "build_principal",
    "normalize_email",
    "translate_db_errors",
]
