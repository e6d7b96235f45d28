"""
User management routes.
"""

from uuid import UUID

from fastapi import APIRouter, status

from rbac_api.api.dependencies.auth import require_permissions
from rbac_api.api.dependencies.services import UserServiceDep
from rbac_api.core.auth import Principal
from rbac_api.schemas.user import AssignRolesRequest, UserResponse, UserUpdate

router = APIRouter()


@router.get("", response_model=list[UserResponse])
async def list_users(
    user_service: UserServiceDep,
    is_active: bool | None = None,
    principal: Principal = require_permissions("users.list"),
):
    return await user_service.list_users(is_active=is_active)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    user_service: UserServiceDep,
    principal: Principal = require_permissions("users.get"),
):
    return await user_service.get(user_id)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    user_service: UserServiceDep,
    principal: Principal = require_permissions("users.update"),
):
    return await user_service.update(
        user_id,
        username=data.username,
        email=data.email,
        is_active=data.is_active,
    )


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: UUID,
    user_service: UserServiceDep,
    principal: Principal = require_permissions("users.delete"),
):
    """Soft delete: the account disappears but its row is kept."""
    await user_service.delete(user_id, actor_id=principal.id)


@router.delete("/{user_id}/purge", status_code=status.HTTP_204_NO_CONTENT)
async def purge_user(
    user_id: UUID,
    user_service: UserServiceDep,
    principal: Principal = require_permissions("users.purge"),
):
    """Hard delete."""
    await user_service.purge(user_id, actor_id=principal.id)


@router.post("/{user_id}/roles", response_model=UserResponse)
async def assign_roles(
    user_id: UUID,
    data: AssignRolesRequest,
    user_service: UserServiceDep,
    principal: Principal = require_permissions("users.assign_roles"),
):
    return await user_service.assign_roles(
        user_id,
        role_ids=data.role_ids,
        role_names=data.role_names,
    )


@router.delete("/{user_id}/roles/{role_id}", response_model=UserResponse)
async def revoke_role(
    user_id: UUID,
    role_id: UUID,
    user_service: UserServiceDep,
    principal: Principal = require_permissions("users.revoke_role"),
):
    return await user_service.revoke_role(user_id, role_id)
