"""
Role routes.
"""

from uuid import UUID

from fastapi import APIRouter, status

from rbac_api.api.dependencies.auth import require_permissions
from rbac_api.api.dependencies.services import RBACServiceDep
from rbac_api.core.auth import Principal
from rbac_api.schemas.rbac import RoleCreate, RolePermissionUpdate, RoleResponse, RoleUpdate

router = APIRouter()


@router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
async def create_role(
    data: RoleCreate,
    rbac: RBACServiceDep,
    principal: Principal = require_permissions("roles.create"),
):
    return await rbac.create_role(
        name=data.name,
        description=data.description,
        is_active=data.is_active,
        permission_names=data.permissions,
    )


@router.get("", response_model=list[RoleResponse])
async def list_roles(
    rbac: RBACServiceDep,
    is_active: bool | None = None,
    principal: Principal = require_permissions("roles.list"),
):
    return await rbac.list_roles(is_active=is_active)


# Declared before /{role_id} so "permissions" is not parsed as an id
@router.patch("/permissions", response_model=RoleResponse)
async def update_role_permission(
    data: RolePermissionUpdate,
    rbac: RBACServiceDep,
    principal: Principal = require_permissions("roles.update_permission"),
):
    """Add or remove a single permission on a role."""
    return await rbac.update_role_permission(
        role_id=data.role_id,
        permission_id=data.id,
        grant=data.is_active,
    )


@router.get("/{role_id}", response_model=RoleResponse)
async def get_role(
    role_id: UUID,
    rbac: RBACServiceDep,
    principal: Principal = require_permissions("roles.get"),
):
    return await rbac.get_role(role_id)


@router.patch("/{role_id}", response_model=RoleResponse)
async def update_role(
    role_id: UUID,
    data: RoleUpdate,
    rbac: RBACServiceDep,
    principal: Principal = require_permissions("roles.update"),
):
    return await rbac.update_role(
        role_id,
        name=data.name,
        description=data.description,
        is_active=data.is_active,
        permission_names=data.permissions,
    )


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_role(
    role_id: UUID,
    rbac: RBACServiceDep,
    principal: Principal = require_permissions("roles.delete"),
):
    await rbac.delete_role(role_id)
