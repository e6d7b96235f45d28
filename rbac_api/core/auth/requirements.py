"""
Static permission requirements per operation.

Every protected route names its operation id; the requirements it needs live
here, in one table, instead of being scattered across decorators. An empty
tuple means "authenticated, but not permission-gated".

Usage:
    from rbac_api.api.dependencies.auth import require_permissions

    @router.get("")
    async def list_users(principal: Principal = require_permissions("users.list")):
        ...
"""

from types import MappingProxyType
from typing import Mapping

from .interfaces import PermissionAction, PermissionRequirement

_C = PermissionAction.CREATE
_R = PermissionAction.READ
_U = PermissionAction.UPDATE
_D = PermissionAction.DELETE
_M = PermissionAction.MANAGE


def _req(*pairs: tuple[str, PermissionAction]) -> tuple[PermissionRequirement, ...]:
    return tuple(PermissionRequirement(resource, action) for resource, action in pairs)


OPERATION_REQUIREMENTS: Mapping[str, tuple[PermissionRequirement, ...]] = MappingProxyType({
    # Auth
    "auth.me": (),

    # Users
    "users.list": _req(("users", _R)),
    "users.get": _req(("users", _R)),
    "users.update": _req(("users", _U)),
    "users.delete": _req(("users", _D)),
    "users.purge": _req(("users", _M)),
    "users.assign_roles": _req(("users", _U), ("roles", _R)),
    "users.revoke_role": _req(("users", _U), ("roles", _R)),

    # Roles
    "roles.create": _req(("roles", _C), ("permissions", _R)),
    "roles.list": _req(("roles", _R)),
    "roles.get": _req(("roles", _R)),
    "roles.update": _req(("roles", _U), ("permissions", _R)),
    "roles.delete": _req(("roles", _D)),
    "roles.update_permission": _req(("roles", _U), ("permissions", _R)),

    # Permissions
    "permissions.create": _req(("permissions", _C), ("resources", _R)),
    "permissions.list": _req(("permissions", _R)),
    "permissions.get": _req(("permissions", _R)),
    "permissions.update": _req(("permissions", _U)),
    "permissions.delete": _req(("permissions", _D)),

    # Resources
    "resources.create": _req(("resources", _C)),
    "resources.list": _req(("resources", _R)),
    "resources.get": _req(("resources", _R)),
    "resources.update": _req(("resources", _U)),
    "resources.delete": _req(("resources", _D)),

    # Seeding
    "seed.admin": _req(("users", _M)),
    "seed.test_data": _req(("users", _M)),
})


def requirements_for(operation_id: str) -> tuple[PermissionRequirement, ...]:
    """Look up an operation's requirements; unknown ids are a programming error."""
    try:
        return OPERATION_REQUIREMENTS[operation_id]
    except KeyError:
        raise LookupError(f"No permission requirements declared for operation '{operation_id}'") from None
