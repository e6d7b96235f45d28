"""
Role, permission and resource administration.
"""

from uuid import UUID

import structlog

from rbac_api.core.auth.interfaces import PermissionAction
from rbac_api.models import Permission, Resource, Role
from rbac_api.repositories import IdentityStore

logger = structlog.get_logger()


class RBACService:
    """
    CRUD over the RBAC graph.

    Usage:
        service = RBACService(store)
        role = await service.create_role("editor", permission_names=["update:articles"])
    """

    def __init__(self, store: IdentityStore):
        self.store = store

    # ============================================================
    # ROLES
    # ============================================================

    async def create_role(
        self,
        name: str,
        description: str | None = None,
        is_active: bool = True,
        permission_names: list[str] | None = None,
    ) -> Role:
        async with self.store.transaction() as tx:
            role = await tx.roles.create(
                name=name,
                description=description,
                is_active=is_active,
                permission_names=permission_names or [],
            )
        logger.info("role.created", role=role.name)
        return role

    async def list_roles(self, is_active: bool | None = None) -> list[Role]:
        async with self.store.transaction() as tx:
            return await tx.roles.list(is_active=is_active)

    async def get_role(self, role_id: UUID) -> Role:
        async with self.store.transaction() as tx:
            return await tx.roles.require(role_id)

    async def update_role(
        self,
        role_id: UUID,
        *,
        name: str | None = None,
        description: str | None = None,
        is_active: bool | None = None,
        permission_names: list[str] | None = None,
    ) -> Role:
        async with self.store.transaction() as tx:
            role = await tx.roles.require(role_id)
            role = await tx.roles.update(
                role,
                name=name,
                description=description,
                is_active=is_active,
                permission_names=permission_names,
            )
        logger.info("role.updated", role=role.name)
        return role

    async def delete_role(self, role_id: UUID) -> None:
        async with self.store.transaction() as tx:
            role = await tx.roles.require(role_id)
            await tx.roles.remove(role)
        logger.info("role.deleted", role_id=str(role_id))

    async def update_role_permission(
        self,
        role_id: UUID,
        permission_id: UUID,
        grant: bool,
    ) -> Role:
        """Add (grant=True) or remove (grant=False) one permission on a role."""
        async with self.store.transaction() as tx:
            role = await tx.roles.require(role_id)
            permission = await tx.permissions.require(permission_id)
            if grant:
                role = await tx.roles.add_permission(role, permission)
            else:
                role = await tx.roles.remove_permission(role, permission)
        logger.info(
            "role.permission_updated",
            role=role.name,
            permission_id=str(permission_id),
            granted=grant,
        )
        return role

    # ============================================================
    # PERMISSIONS
    # ============================================================

    async def create_permission(
        self,
        name: str,
        resource_name: str,
        action: PermissionAction = PermissionAction.READ,
        description: str | None = None,
        is_active: bool = True,
    ) -> Permission:
        async with self.store.transaction() as tx:
            resource = await tx.resources.require_by_name(resource_name)
            permission = await tx.permissions.create(
                name=name,
                resource=resource,
                action=action,
                description=description,
                is_active=is_active,
            )
        logger.info("permission.created", permission=permission.name)
        return permission

    async def list_permissions(
        self,
        is_active: bool | None = None,
        resource_name: str | None = None,
    ) -> list[Permission]:
        async with self.store.transaction() as tx:
            return await tx.permissions.list(is_active=is_active, resource_name=resource_name)

    async def get_permission(self, permission_id: UUID) -> Permission:
        async with self.store.transaction() as tx:
            return await tx.permissions.require(permission_id)

    async def update_permission(
        self,
        permission_id: UUID,
        *,
        name: str | None = None,
        description: str | None = None,
        action: PermissionAction | None = None,
        is_active: bool | None = None,
        resource_name: str | None = None,
    ) -> Permission:
        async with self.store.transaction() as tx:
            permission = await tx.permissions.require(permission_id)
            resource = await tx.resources.require_by_name(resource_name) if resource_name else None
            permission = await tx.permissions.update(
                permission,
                name=name,
                description=description,
                action=action,
                is_active=is_active,
                resource=resource,
            )
        logger.info("permission.updated", permission=permission.name)
        return permission

    async def delete_permission(self, permission_id: UUID) -> None:
        async with self.store.transaction() as tx:
            permission = await tx.permissions.require(permission_id)
            await tx.permissions.remove(permission)
        logger.info("permission.deleted", permission_id=str(permission_id))

    # ============================================================
    # RESOURCES
    # ============================================================

    async def create_resource(
        self,
        name: str,
        description: str | None = None,
        is_active: bool = True,
    ) -> Resource:
        async with self.store.transaction() as tx:
            resource = await tx.resources.create(name=name, description=description, is_active=is_active)
        logger.info("resource.created", resource=resource.name)
        return resource

    async def list_resources(self, is_active: bool | None = None) -> list[Resource]:
        async with self.store.transaction() as tx:
            return await tx.resources.list(is_active=is_active)

    async def get_resource(self, resource_id: UUID) -> Resource:
        async with self.store.transaction() as tx:
            return await tx.resources.require(resource_id)

    async def update_resource(
        self,
        resource_id: UUID,
        *,
        name: str | None = None,
        description: str | None = None,
        is_active: bool | None = None,
    ) -> Resource:
        async with self.store.transaction() as tx:
            resource = await tx.resources.require(resource_id)
            resource = await tx.resources.update(
                resource,
                name=name,
                description=description,
                is_active=is_active,
            )
        logger.info("resource.updated", resource=resource.name)
        return resource

    async def delete_resource(self, resource_id: UUID) -> None:
        """Delete a resource together with its permissions."""
        async with self.store.transaction() as tx:
            resource = await tx.resources.require(resource_id)
            await tx.resources.remove(resource)
        logger.info("resource.deleted", resource_id=str(resource_id))
