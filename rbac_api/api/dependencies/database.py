"""
Database dependencies.
"""

from rbac_api.models.database import get_session_factory
from rbac_api.repositories import IdentityStore


def get_identity_store() -> IdentityStore:
    """Identity store over the application's session factory."""
    return IdentityStore(get_session_factory())
