"""
Initial data seeding.

seed_admin() bootstraps an empty database with the RBAC resources, their CRUD and
manage permissions, an ``admin`` role holding all of them and one verified admin
account. seed_test_data() adds development roles and users on top.
"""

from dataclasses import dataclass, field

import structlog

from rbac_api.core.auth.interfaces import CRUD_ACTIONS, PermissionAction
from rbac_api.core.auth.passwords import PasswordHasher
from rbac_api.core.config import SeedSettings, settings
from rbac_api.core.errors import ConflictError
from rbac_api.models import Permission, Resource, Role
from rbac_api.repositories import IdentityStore, IdentityTransaction

logger = structlog.get_logger()

ADMIN_RESOURCES: tuple[tuple[str, str], ...] = (
    ("users", "User management"),
    ("roles", "Role management"),
    ("permissions", "Permission management"),
    ("resources", "Resource management"),
)

# Admin also holds manage on every seeded resource
ADMIN_ACTIONS = CRUD_ACTIONS + (PermissionAction.MANAGE,)

MODERATOR_RESOURCES = ("users", "roles")

TEST_USERS: tuple[tuple[str, str, str, str], ...] = (
    # username, email, password, role
    ("testuser1", "user1@example.com", "Test@123", "user"),
    ("testuser2", "user2@example.com", "Test@123", "user"),
    ("moderator", "moderator@example.com", "Mod@123", "moderator"),
)


def permission_name(action: PermissionAction, resource: str) -> str:
    return f"{action.value}:{resource}"


@dataclass
class SeedAdminResult:
    message: str
    admin_email: str
    admin_role: str
    permissions_count: int


@dataclass
class SeedTestDataResult:
    message: str
    created_users: list[str] = field(default_factory=list)
    skipped_users: list[str] = field(default_factory=list)


class SeedService:
    def __init__(
        self,
        store: IdentityStore,
        hasher: PasswordHasher,
        config: SeedSettings | None = None,
    ):
        self.store = store
        self.hasher = hasher
        self.config = config or settings.seed

    async def admin_exists(self) -> bool:
        """
        True once an admin has ever been seeded.

        Stays true after the seeded account is tombstoned, purged or renamed:
        the ``admin`` role outlives its holders, and a reserved admin email or
        any account holding ``manage:users`` counts as well.
        """
        async with self.store.transaction() as tx:
            if await tx.roles.find_by_name("admin") is not None:
                return True
            if await tx.users.exists_with_email(self.config.admin_email):
                return True
            return await tx.users.any_with_grant("users", PermissionAction.MANAGE)

    async def _resource(self, tx: IdentityTransaction, name: str, description: str) -> Resource:
        existing = await tx.resources.find_by_name(name)
        if existing is not None:
            return existing
        return await tx.resources.create(name=name, description=description)

    async def _permission(
        self,
        tx: IdentityTransaction,
        resource: Resource,
        action: PermissionAction,
    ) -> Permission:
        name = permission_name(action, resource.name)
        existing = await tx.permissions.find_by_name(name)
        if existing is not None:
            return existing
        return await tx.permissions.create(
            name=name,
            resource=resource,
            action=action,
            description=f"Can {action.value} {resource.name}",
        )

    async def seed_admin(self) -> SeedAdminResult:
        """
        Create the admin account with full RBAC permissions, all in one transaction.

        Raises:
            ConflictError: Admin user already exists
        """
        async with self.store.transaction() as tx:
            if await tx.users.exists_with_email(self.config.admin_email):
                raise ConflictError("Admin user already exists")

            logger.info("seed.admin.started")
            permissions: list[Permission] = []
            for name, description in ADMIN_RESOURCES:
                resource = await self._resource(tx, name, description)
                for action in ADMIN_ACTIONS:
                    permissions.append(await self._permission(tx, resource, action))

            names = [p.name for p in permissions]
            admin_role = await tx.roles.find_by_name("admin")
            if admin_role is None:
                admin_role = await tx.roles.create(
                    name="admin",
                    description="Administrator with full access",
                    permission_names=names,
                )
            else:
                admin_role = await tx.roles.update(admin_role, permission_names=names)

            admin = await tx.users.create_user(
                username=self.config.admin_username,
                email=self.config.admin_email,
                password_hash=await self.hasher.hash_async(self.config.admin_password),
                is_active=True,
                email_verified=True,
                roles=[admin_role],
            )

        logger.info("seed.admin.completed", user_id=str(admin.id), permissions=len(permissions))
        return SeedAdminResult(
            message="Admin user created successfully",
            admin_email=admin.email,
            admin_role=admin_role.name,
            permissions_count=len(permissions),
        )

    async def _role(
        self,
        tx: IdentityTransaction,
        name: str,
        description: str,
        permission_names: list[str],
    ) -> Role:
        existing = await tx.roles.find_by_name(name)
        if existing is not None:
            return existing
        return await tx.roles.create(
            name=name,
            description=description,
            permission_names=permission_names,
        )

    async def seed_test_data(self) -> SeedTestDataResult:
        """Create ``user`` and ``moderator`` roles plus test accounts, skipping what exists."""
        result = SeedTestDataResult(message="Test data created successfully")

        async with self.store.transaction() as tx:
            logger.info("seed.test_data.started")
            read_permissions = [
                p.name for p in await tx.permissions.list()
                if p.action == PermissionAction.READ
            ]
            moderator_permissions = [
                permission_name(action, resource)
                for resource in MODERATOR_RESOURCES
                for action in CRUD_ACTIONS
            ]
            roles = {
                "user": await self._role(
                    tx, "user", "Regular user with limited access", read_permissions,
                ),
                "moderator": await self._role(
                    tx, "moderator", "Moderator with some administrative privileges", moderator_permissions,
                ),
            }

            for username, email, password, role_name in TEST_USERS:
                if await tx.users.exists_with_email(email):
                    result.skipped_users.append(email)
                    continue
                await tx.users.create_user(
                    username=username,
                    email=email,
                    password_hash=await self.hasher.hash_async(password),
                    is_active=True,
                    email_verified=True,
                    roles=[roles[role_name]],
                )
                result.created_users.append(email)

        logger.info(
            "seed.test_data.completed",
            created=len(result.created_users),
            skipped=len(result.skipped_users),
        )
        return result
