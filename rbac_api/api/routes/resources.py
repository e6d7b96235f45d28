"""
Resource routes.
"""

from uuid import UUID

from fastapi import APIRouter, status

from rbac_api.api.dependencies.auth import require_permissions
from rbac_api.api.dependencies.services import RBACServiceDep
from rbac_api.core.auth import Principal
from rbac_api.schemas.rbac import ResourceCreate, ResourceResponse, ResourceUpdate

router = APIRouter()


@router.post("", response_model=ResourceResponse, status_code=status.HTTP_201_CREATED)
async def create_resource(
    data: ResourceCreate,
    rbac: RBACServiceDep,
    principal: Principal = require_permissions("resources.create"),
):
    return await rbac.create_resource(
        name=data.name,
        description=data.description,
        is_active=data.is_active,
    )


@router.get("", response_model=list[ResourceResponse])
async def list_resources(
    rbac: RBACServiceDep,
    is_active: bool | None = None,
    principal: Principal = require_permissions("resources.list"),
):
    return await rbac.list_resources(is_active=is_active)


@router.get("/{resource_id}", response_model=ResourceResponse)
async def get_resource(
    resource_id: UUID,
    rbac: RBACServiceDep,
    principal: Principal = require_permissions("resources.get"),
):
    return await rbac.get_resource(resource_id)


@router.patch("/{resource_id}", response_model=ResourceResponse)
async def update_resource(
    resource_id: UUID,
    data: ResourceUpdate,
    rbac: RBACServiceDep,
    principal: Principal = require_permissions("resources.update"),
):
    return await rbac.update_resource(
        resource_id,
        name=data.name,
        description=data.description,
        is_active=data.is_active,
    )


@router.delete("/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_resource(
    resource_id: UUID,
    rbac: RBACServiceDep,
    principal: Principal = require_permissions("resources.delete"),
):
    """Deletes the resource and every permission on it."""
    await rbac.delete_resource(resource_id)
