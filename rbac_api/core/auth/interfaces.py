"""
Authorization interfaces - Core abstractions.

A permission is a (resource, action) pair. Actions form a closed set; MANAGE
on a resource stands in for every other action on that same resource.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class PermissionAction(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE = "manage"


# Actions implied by MANAGE on the same resource
CRUD_ACTIONS: tuple[PermissionAction, ...] = (
    PermissionAction.CREATE,
    PermissionAction.READ,
    PermissionAction.UPDATE,
    PermissionAction.DELETE,
)


@dataclass(frozen=True)
class PermissionRequirement:
    """A single (resource, action) pair an operation needs."""

    resource: str
    action: PermissionAction

    def __str__(self) -> str:
        return f"{self.resource}:{self.action.value}"


# ============================================================
# POLICY DECISION
# ============================================================

@dataclass
class PolicyDecision:
    """
    Result of a policy evaluation.

    Attributes:
        allowed: Whether the action is permitted
        reason: Human-readable explanation (for errors/logging)
        metadata: Additional data (missing requirements, etc.)
    """
    allowed: bool
    reason: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def allow(cls, reason: str | None = None) -> "PolicyDecision":
        return cls(allowed=True, reason=reason)

    @classmethod
    def deny(cls, reason: str = "Permission denied", **metadata: Any) -> "PolicyDecision":
        return cls(allowed=False, reason=reason, metadata=metadata)
