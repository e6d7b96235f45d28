"""
Permission repository.
"""

from sqlalchemy import Select, select
from sqlalchemy.orm import selectinload

from rbac_api.core.auth.interfaces import PermissionAction
from rbac_api.models import Permission, Resource

from .base import BaseRepository


class PermissionRepository(BaseRepository[Permission]):
    model = Permission
    entity_name = "Permission"

    def _base_query(self) -> Select:
        return select(Permission).options(selectinload(Permission.resource))

    async def reload(self, permission: Permission) -> Permission:
        stmt = (
            self._base_query()
            .where(Permission.id == permission.id)
            .execution_options(populate_existing=True)
        )
        return await self._one(stmt)

    async def list(
        self,
        is_active: bool | None = None,
        resource_name: str | None = None,
    ) -> list[Permission]:
        stmt = self._base_query()
        if is_active is not None:
            stmt = stmt.where(Permission.is_active == is_active)
        if resource_name:
            stmt = stmt.join(Permission.resource).where(Resource.name == resource_name)
        return await self._all(stmt.order_by(Permission.created_at.desc()))

    async def create(
        self,
        *,
        name: str,
        resource: Resource,
        action: PermissionAction = PermissionAction.READ,
        description: str | None = None,
        is_active: bool = True,
    ) -> Permission:
        await self.ensure_name_available(name)
        permission = Permission(
            name=name,
            description=description,
            action=action,
            is_active=is_active,
            resource=resource,
        )
        await self.add(permission)
        return await self.reload(permission)

    async def update(
        self,
        permission: Permission,
        *,
        name: str | None = None,
        description: str | None = None,
        action: PermissionAction | None = None,
        is_active: bool | None = None,
        resource: Resource | None = None,
    ) -> Permission:
        if name is not None and name != permission.name:
            await self.ensure_name_available(name, exclude_id=permission.id)
            permission.name = name
        if description is not None:
            permission.description = description
        if action is not None:
            permission.action = action
        if is_active is not None:
            permission.is_active = is_active
        if resource is not None:
            permission.resource = resource
        await self.flush(f"Permission with name '{permission.name}' already exists")
        return await self.reload(permission)
