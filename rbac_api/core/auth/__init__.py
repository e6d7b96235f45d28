"""
Authorization core.

Pure pieces only: permission vocabulary, the evaluator, the static
requirement table, token issuing and password hashing. FastAPI wiring lives
in rbac_api.api.dependencies.auth.
"""

from .evaluator import (
    PermissionGrant,
    Principal,
    RoleGrant,
    evaluate,
    flatten_grants,
)
from .interfaces import (
    CRUD_ACTIONS,
    PermissionAction,
    PermissionRequirement,
    PolicyDecision,
)
from .requirements import OPERATION_REQUIREMENTS, requirements_for

__all__ = [
    "CRUD_ACTIONS",
    "OPERATION_REQUIREMENTS",
    "PermissionAction",
    "PermissionGrant",
    "PermissionRequirement",
    "PolicyDecision",
    "Principal",
    "RoleGrant",
    "evaluate",
    "flatten_grants",
    "requirements_for",
]
