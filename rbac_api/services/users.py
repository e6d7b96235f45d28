"""
User administration service.
"""

from uuid import UUID

import structlog

from rbac_api.core.errors import ValidationError
from rbac_api.core.hooks import hooks
from rbac_api.models import User
from rbac_api.repositories import IdentityStore

logger = structlog.get_logger()


class UserService:
    def __init__(self, store: IdentityStore):
        self.store = store

    async def list_users(self, is_active: bool | None = None) -> list[User]:
        async with self.store.transaction() as tx:
            return await tx.users.list(is_active=is_active)

    async def get(self, user_id: UUID) -> User:
        async with self.store.transaction() as tx:
            return await tx.users.require(user_id)

    async def update(
        self,
        user_id: UUID,
        *,
        username: str | None = None,
        email: str | None = None,
        is_active: bool | None = None,
    ) -> User:
        if username is not None and not username.strip():
            raise ValidationError("Username cannot be blank", errors={"username": "blank"})
        async with self.store.transaction() as tx:
            user = await tx.users.require(user_id)
            user = await tx.users.update(
                user,
                username=username.strip() if username is not None else None,
                email=email,
                is_active=is_active,
            )
        logger.info("user.updated", user_id=str(user_id))
        return user

    async def delete(self, user_id: UUID, actor_id: UUID | None = None) -> None:
        """Soft delete."""
        async with self.store.transaction() as tx:
            user = await tx.users.require(user_id)
            await tx.users.soft_delete(user)
        logger.info("user.deleted", user_id=str(user_id), actor_id=str(actor_id) if actor_id else None)
        await hooks.trigger("user.deleted", user_id=user_id)

    async def purge(self, user_id: UUID, actor_id: UUID | None = None) -> None:
        """Hard delete, including already tombstoned accounts."""
        async with self.store.transaction() as tx:
            await tx.users.purge(user_id, actor_id=actor_id)
        await hooks.trigger("user.purged", user_id=user_id, actor_id=actor_id)

    async def assign_roles(
        self,
        user_id: UUID,
        role_ids: list[UUID] | None = None,
        role_names: list[str] | None = None,
    ) -> User:
        if not role_ids and not role_names:
            raise ValidationError("Provide role_ids or role_names", errors={"roles": "required"})
        async with self.store.transaction() as tx:
            user = await tx.users.require(user_id)
            roles = []
            if role_ids:
                roles += await tx.roles.get_many_by_ids(role_ids)
            if role_names:
                roles += await tx.roles.get_many_by_names(role_names)
            user = await tx.users.assign_roles(user, roles)
        logger.info("user.roles_assigned", user_id=str(user_id), roles=[r.name for r in roles])
        return user

    async def revoke_role(self, user_id: UUID, role_id: UUID) -> User:
        async with self.store.transaction() as tx:
            user = await tx.users.require(user_id)
            user = await tx.users.revoke_role(user, role_id)
        logger.info("user.role_revoked", user_id=str(user_id), role_id=str(role_id))
        return user
