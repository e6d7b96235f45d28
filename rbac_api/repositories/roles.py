"""
Role repository.
"""

from typing import Iterable

import structlog
from sqlalchemy import Select, select
from sqlalchemy.orm import selectinload

from rbac_api.core.errors import ConflictError, NotFoundError
from rbac_api.models import Permission, Role

from .base import BaseRepository

logger = structlog.get_logger()


class RoleRepository(BaseRepository[Role]):
    model = Role
    entity_name = "Role"

    def _base_query(self) -> Select:
        return select(Role).options(
            selectinload(Role.permissions).selectinload(Permission.resource)
        )

    async def _permissions_by_name(self, names: Iterable[str]) -> list[Permission]:
        """Resolve permission names; unknown names are skipped with a warning."""
        wanted = list(dict.fromkeys(names))
        if not wanted:
            return []
        stmt = (
            select(Permission)
            .where(Permission.name.in_(wanted))
            .options(selectinload(Permission.resource))
        )
        found = {perm.name: perm for perm in await self._all(stmt)}
        for name in wanted:
            if name not in found:
                logger.warning("role.permission_not_found", permission=name)
        return [found[name] for name in wanted if name in found]

    async def reload(self, role: Role) -> Role:
        stmt = self._base_query().where(Role.id == role.id).execution_options(populate_existing=True)
        return await self._one(stmt)

    async def create(
        self,
        *,
        name: str,
        description: str | None = None,
        is_active: bool = True,
        permission_names: Iterable[str] = (),
    ) -> Role:
        await self.ensure_name_available(name)
        role = Role(
            name=name,
            description=description,
            is_active=is_active,
            permissions=await self._permissions_by_name(permission_names),
        )
        await self.add(role)
        return await self.reload(role)

    async def update(
        self,
        role: Role,
        *,
        name: str | None = None,
        description: str | None = None,
        is_active: bool | None = None,
        permission_names: list[str] | None = None,
    ) -> Role:
        """Update fields; a given permission list replaces the current set."""
        if name is not None and name != role.name:
            await self.ensure_name_available(name, exclude_id=role.id)
            role.name = name
        if description is not None:
            role.description = description
        if is_active is not None:
            role.is_active = is_active
        if permission_names is not None:
            role.permissions = await self._permissions_by_name(permission_names)
        await self.flush(f"Role with name '{role.name}' already exists")
        return await self.reload(role)

    async def add_permission(self, role: Role, permission: Permission) -> Role:
        if any(p.id == permission.id for p in role.permissions):
            raise ConflictError(f"Role '{role.name}' already has permission '{permission.name}'")
        role.permissions.append(permission)
        await self.flush()
        return await self.reload(role)

    async def remove_permission(self, role: Role, permission: Permission) -> Role:
        for held in role.permissions:
            if held.id == permission.id:
                role.permissions.remove(held)
                await self.flush()
                return await self.reload(role)
        raise NotFoundError(f"Role '{role.name}' does not have permission '{permission.name}'")

    async def get_many_by_ids(self, ids: Iterable) -> list[Role]:
        wanted = list(dict.fromkeys(ids))
        roles = await self._all(select(Role).where(Role.id.in_(wanted)))
        missing = set(wanted) - {role.id for role in roles}
        if missing:
            raise NotFoundError(f"Role '{sorted(str(m) for m in missing)[0]}' not found")
        return roles

    async def get_many_by_names(self, names: Iterable[str]) -> list[Role]:
        wanted = list(dict.fromkeys(names))
        roles = await self._all(select(Role).where(Role.name.in_(wanted)))
        missing = set(wanted) - {role.name for role in roles}
        if missing:
            raise NotFoundError(f"Role '{sorted(missing)[0]}' not found")
        return roles
