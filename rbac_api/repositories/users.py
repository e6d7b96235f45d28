"""
User repository.

Every read path excludes tombstoned users. Emails are normalized on the way
in, so lookups are case-insensitive while usernames match exactly.
"""

from typing import Iterable
from uuid import UUID

import structlog
from sqlalchemy import Select, select
from sqlalchemy.orm import selectinload

from rbac_api.core.auth.evaluator import PermissionGrant, Principal, RoleGrant
from rbac_api.core.auth.interfaces import PermissionAction
from rbac_api.core.errors import ConflictError, NotFoundError
from rbac_api.models import Permission, Resource, Role, User, utcnow

from .base import BaseRepository

logger = structlog.get_logger()


def normalize_email(email: str) -> str:
    return email.strip().lower()


def build_principal(user: User) -> Principal:
    """Snapshot a user with roles -> permissions -> resource loaded."""
    return Principal(
        id=user.id,
        email=user.email,
        username=user.username,
        is_active=user.is_active,
        email_verified=user.email_verified,
        roles=tuple(
            RoleGrant(
                name=role.name,
                is_active=role.is_active,
                permissions=tuple(
                    PermissionGrant(
                        name=perm.name,
                        resource=perm.resource.name,
                        action=perm.action,
                        is_active=perm.is_active,
                        resource_active=perm.resource.is_active,
                    )
                    for perm in role.permissions
                ),
            )
            for role in user.roles
        ),
    )


class UserRepository(BaseRepository[User]):
    model = User
    entity_name = "User"

    def _base_query(self) -> Select:
        """Exclude tombstoned users; roles are always loaded."""
        return (
            select(User)
            .where(User.deleted_at.is_(None))
            .options(selectinload(User.roles))
        )

    def _principal_query(self) -> Select:
        return (
            select(User)
            .where(User.deleted_at.is_(None))
            .options(
                selectinload(User.roles)
                .selectinload(Role.permissions)
                .selectinload(Permission.resource)
            )
            .execution_options(populate_existing=True)
        )

    async def find_by_email(self, email: str) -> User | None:
        return await self._one(self._base_query().where(User.email == normalize_email(email)))

    async def find_by_username(self, username: str) -> User | None:
        return await self._one(self._base_query().where(User.username == username))

    async def find_by_name(self, name: str) -> User | None:
        return await self.find_by_username(name)

    async def find_by_verification_token(self, token: str) -> User | None:
        return await self._one(self._base_query().where(User.verification_token == token))

    async def exists_with_email(self, email: str) -> bool:
        """Includes tombstoned accounts: their email stays reserved."""
        stmt = select(User.id).where(User.email == normalize_email(email))
        return await self._one(stmt) is not None

    async def exists_with_username(self, username: str) -> bool:
        stmt = select(User.id).where(User.username == username)
        return await self._one(stmt) is not None

    async def any_with_grant(self, resource: str, action: PermissionAction) -> bool:
        """Whether any account, tombstoned or not, holds the grant through a role."""
        stmt = (
            select(User.id)
            .join(User.roles)
            .join(Role.permissions)
            .join(Permission.resource)
            .where(Resource.name == resource, Permission.action == action)
            .limit(1)
        )
        return await self._one(stmt) is not None

    async def list(self, is_active: bool | None = None) -> list[User]:
        stmt = self._base_query()
        if is_active is not None:
            stmt = stmt.where(User.is_active == is_active)
        return await self._all(stmt.order_by(User.created_at.desc()))

    async def create_user(
        self,
        *,
        username: str,
        email: str,
        password_hash: str | None,
        is_active: bool = True,
        email_verified: bool = False,
        verification_token: str | None = None,
        roles: Iterable[Role] = (),
    ) -> User:
        """
        Insert a user.

        The pre-checks give a clear message; a concurrent insert that slips past
        them still fails on the unique constraints and surfaces as ConflictError.
        """
        email = normalize_email(email)
        if await self.exists_with_email(email):
            raise ConflictError("Email already exists")
        if await self.exists_with_username(username):
            raise ConflictError("Username already exists")

        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            is_active=is_active,
            email_verified=email_verified,
            verification_token=verification_token,
            roles=list(roles),
        )
        self.db.add(user)
        await self.flush("User with this email or username already exists")
        return user

    async def update(self, user: User, **fields) -> User:
        """Update profile fields, re-checking uniqueness for email/username."""
        if "email" in fields and fields["email"] is not None:
            fields["email"] = normalize_email(fields["email"])
            if fields["email"] != user.email and await self.exists_with_email(fields["email"]):
                raise ConflictError("Email already exists")
        if "username" in fields and fields["username"] is not None:
            if fields["username"] != user.username and await self.exists_with_username(fields["username"]):
                raise ConflictError("Username already exists")
        return await self.apply(user, {k: v for k, v in fields.items() if v is not None})

    async def mark_verified(self, user: User) -> User:
        return await self.apply(user, {"email_verified": True, "verification_token": None})

    async def load_principal(self, user_id: UUID) -> Principal | None:
        user = await self._one(self._principal_query().where(User.id == user_id))
        return build_principal(user) if user is not None else None

    async def assign_roles(self, user: User, roles: Iterable[Role]) -> User:
        """Add roles to the user; already held roles are left as they are."""
        held = {role.id for role in user.roles}
        for role in roles:
            if role.id not in held:
                user.roles.append(role)
                held.add(role.id)
        await self.flush()
        return user

    async def revoke_role(self, user: User, role_id: UUID) -> User:
        for role in user.roles:
            if role.id == role_id:
                user.roles.remove(role)
                await self.flush()
                return user
        raise NotFoundError(f"User does not hold role '{role_id}'")

    async def soft_delete(self, user: User) -> None:
        """Tombstone the account; it disappears from every read path."""
        user.deleted_at = utcnow()
        user.is_active = False
        user.verification_token = None
        await self.flush()

    async def purge(self, user_id: UUID, actor_id: UUID | None = None) -> None:
        """Physically remove a user, tombstoned or not."""
        stmt = select(User).where(User.id == user_id)
        user = await self._one(stmt)
        if user is None:
            raise NotFoundError.for_entity(self.entity_name, user_id)
        await self.remove(user)
        logger.warning(
            "user.purged",
            user_id=str(user_id),
            actor_id=str(actor_id) if actor_id else None,
            was_deleted=user.is_deleted,
        )
