"""
Permission evaluation.

evaluate() is a pure function over immutable snapshots of a principal's roles.
It performs no I/O, so it can be called from request handlers, services and
tests alike without a session or container.

Decision order:
1. Inactive principal -> deny
2. No requirements -> allow
3. No active role -> deny
4. Every required (resource, action) must be granted by an active permission
   on an active resource of an active role, either exactly or via MANAGE.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence
from uuid import UUID

from .interfaces import PermissionAction, PermissionRequirement, PolicyDecision


@dataclass(frozen=True)
class PermissionGrant:
    name: str
    resource: str
    action: PermissionAction
    is_active: bool = True
    resource_active: bool = True


@dataclass(frozen=True)
class RoleGrant:
    name: str
    is_active: bool = True
    permissions: tuple[PermissionGrant, ...] = ()


@dataclass(frozen=True)
class Principal:
    """Snapshot of an authenticated user and everything they are granted."""

    id: UUID
    email: str
    username: str
    is_active: bool = True
    email_verified: bool = False
    roles: tuple[RoleGrant, ...] = field(default_factory=tuple)

    @property
    def role_names(self) -> list[str]:
        return [role.name for role in self.roles]

    def has_role(self, name: str) -> bool:
        return any(role.name == name and role.is_active for role in self.roles)


def flatten_grants(roles: Iterable[RoleGrant]) -> set[tuple[str, PermissionAction]]:
    """Collapse active roles into the set of effective (resource, action) grants."""
    grants: set[tuple[str, PermissionAction]] = set()
    for role in roles:
        if not role.is_active:
            continue
        for perm in role.permissions:
            if perm.is_active and perm.resource_active:
                grants.add((perm.resource, perm.action))
    return grants


def is_satisfied(
    requirement: PermissionRequirement,
    grants: set[tuple[str, PermissionAction]],
) -> bool:
    return (
        (requirement.resource, requirement.action) in grants
        or (requirement.resource, PermissionAction.MANAGE) in grants
    )


def evaluate(
    principal: Principal,
    required: Sequence[PermissionRequirement],
) -> PolicyDecision:
    """Decide whether principal holds every requirement."""
    if not principal.is_active:
        return PolicyDecision.deny("Principal is inactive")

    if not required:
        return PolicyDecision.allow("No permissions required")

    if not any(role.is_active for role in principal.roles):
        return PolicyDecision.deny("Principal has no active roles")

    grants = flatten_grants(principal.roles)
    missing = [str(req) for req in required if not is_satisfied(req, grants)]
    if missing:
        return PolicyDecision.deny(
            f"Missing permissions: {', '.join(missing)}",
            missing=missing,
        )

    return PolicyDecision.allow()
