"""
Permission routes.
"""

from uuid import UUID

from fastapi import APIRouter, status

from rbac_api.api.dependencies.auth import require_permissions
from rbac_api.api.dependencies.services import RBACServiceDep
from rbac_api.core.auth import Principal
from rbac_api.schemas.rbac import PermissionCreate, PermissionResponse, PermissionUpdate

router = APIRouter()


@router.post("", response_model=PermissionResponse, status_code=status.HTTP_201_CREATED)
async def create_permission(
    data: PermissionCreate,
    rbac: RBACServiceDep,
    principal: Principal = require_permissions("permissions.create"),
):
    return await rbac.create_permission(
        name=data.name,
        resource_name=data.resource_name,
        action=data.action,
        description=data.description,
        is_active=data.is_active,
    )


@router.get("", response_model=list[PermissionResponse])
async def list_permissions(
    rbac: RBACServiceDep,
    is_active: bool | None = None,
    resource_name: str | None = None,
    principal: Principal = require_permissions("permissions.list"),
):
    return await rbac.list_permissions(is_active=is_active, resource_name=resource_name)


@router.get("/{permission_id}", response_model=PermissionResponse)
async def get_permission(
    permission_id: UUID,
    rbac: RBACServiceDep,
    principal: Principal = require_permissions("permissions.get"),
):
    return await rbac.get_permission(permission_id)


@router.patch("/{permission_id}", response_model=PermissionResponse)
async def update_permission(
    permission_id: UUID,
    data: PermissionUpdate,
    rbac: RBACServiceDep,
    principal: Principal = require_permissions("permissions.update"),
):
    return await rbac.update_permission(
        permission_id,
        name=data.name,
        description=data.description,
        action=data.action,
        is_active=data.is_active,
        resource_name=data.resource_name,
    )


@router.delete("/{permission_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_permission(
    permission_id: UUID,
    rbac: RBACServiceDep,
    principal: Principal = require_permissions("permissions.delete"),
):
    await rbac.delete_permission(permission_id)
