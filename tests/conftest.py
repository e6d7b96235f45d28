"""
Pytest fixtures for testing.

Provides:
- A fresh SQLite database per test and an IdentityStore over it
- Services wired with fast password hashing and a recording mail gateway
- Test client with dependency overrides and auth helpers
- Factory fixtures for users and RBAC data
"""

from typing import AsyncGenerator, Iterable
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from rbac_api.api.dependencies.database import get_identity_store
from rbac_api.core.auth.interfaces import PermissionAction
from rbac_api.core.auth.passwords import PasswordHasher, get_password_hasher
from rbac_api.core.auth.tokens import TokenIssuer, get_token_issuer
from rbac_api.core.config import DatabaseSettings
from rbac_api.core.errors import DeliveryError
from rbac_api.main import app
from rbac_api.models import Permission, Resource, Role, User
from rbac_api.models.database import build_engine, build_session_factory, init_db
from rbac_api.notifications import NotificationRequest, get_notification_gateway
from rbac_api.repositories import IdentityStore
from rbac_api.services import AuthService, RBACService, SeedService, UserService

TEST_SECRET = "test-secret-key"
TEST_FRONTEND_URL = "http://frontend.test"
DEFAULT_PASSWORD = "Password123!"


# ============ Mock Implementations ============


class MemoryNotificationGateway:
    """Records every request instead of delivering it."""

    def __init__(self):
        self.sent: list[NotificationRequest] = []

    async def send(self, request: NotificationRequest) -> None:
        self.sent.append(request)

    def get_last(self) -> NotificationRequest | None:
        return self.sent[-1] if self.sent else None

    def clear(self) -> None:
        self.sent.clear()


class FailingNotificationGateway:
    """Fails every delivery."""

    def __init__(self):
        self.attempts = 0

    async def send(self, request: NotificationRequest) -> None:
        self.attempts += 1
        raise DeliveryError("SMTP server unavailable")


# ============ Database ============


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """File-backed SQLite database, created fresh for each test."""
    engine = build_engine(DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"))
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def store(db_engine) -> IdentityStore:
    return IdentityStore(build_session_factory(db_engine))


# ============ Services ============


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens() -> TokenIssuer:
    return TokenIssuer(secret_key=TEST_SECRET, expire_minutes=60)


@pytest.fixture
def mail() -> MemoryNotificationGateway:
    return MemoryNotificationGateway()


@pytest.fixture
def failing_mail() -> FailingNotificationGateway:
    return FailingNotificationGateway()


@pytest.fixture
def auth_service(store, tokens, hasher, mail) -> AuthService:
    return AuthService(
        store=store,
        tokens=tokens,
        hasher=hasher,
        gateway=mail,
        frontend_url=TEST_FRONTEND_URL,
    )


@pytest.fixture
def user_service(store) -> UserService:
    return UserService(store)


@pytest.fixture
def rbac_service(store) -> RBACService:
    return RBACService(store)


@pytest.fixture
def seed_service(store, hasher) -> SeedService:
    return SeedService(store, hasher)


# ============ Client ============


@pytest_asyncio.fixture
async def client(store, tokens, hasher, mail) -> AsyncGenerator[AsyncClient, None]:
    """Test client with store, token issuer, hasher and mail gateway overridden."""
    app.dependency_overrides[get_identity_store] = lambda: store
    app.dependency_overrides[get_token_issuer] = lambda: tokens
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    app.dependency_overrides[get_notification_gateway] = lambda: mail

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


# ============ Factory Fixtures ============


class UserFactory:
    """Factory for creating test users."""

    def __init__(self, store: IdentityStore, hasher: PasswordHasher):
        self.store = store
        self.hasher = hasher

    async def create(
        self,
        email: str | None = None,
        username: str | None = None,
        password: str = DEFAULT_PASSWORD,
        is_active: bool = True,
        email_verified: bool = True,
        verification_token: str | None = None,
        roles: Iterable[str] = (),
    ) -> User:
        suffix = uuid4().hex[:8]
        async with self.store.transaction() as tx:
            role_rows = await tx.roles.get_many_by_names(roles) if roles else []
            return await tx.users.create_user(
                username=username or f"user-{suffix}",
                email=email or f"test-{suffix}@example.com",
                password_hash=self.hasher.hash(password),
                is_active=is_active,
                email_verified=email_verified,
                verification_token=verification_token,
                roles=role_rows,
            )


class RBACFactory:
    """Factory for resources, permissions and roles."""

    def __init__(self, store: IdentityStore):
        self.store = store

    async def resource(self, name: str, is_active: bool = True) -> Resource:
        async with self.store.transaction() as tx:
            existing = await tx.resources.find_by_name(name)
            if existing is not None:
                return existing
            return await tx.resources.create(name=name, is_active=is_active)

    async def permission(
        self,
        resource: str,
        action: PermissionAction,
        is_active: bool = True,
        name: str | None = None,
    ) -> Permission:
        res = await self.resource(resource)
        async with self.store.transaction() as tx:
            res = await tx.resources.require(res.id)
            return await tx.permissions.create(
                name=name or f"{action.value}:{resource}",
                resource=res,
                action=action,
                is_active=is_active,
            )

    async def role(
        self,
        name: str,
        grants: Iterable[tuple[str, PermissionAction]] = (),
        is_active: bool = True,
    ) -> Role:
        names = []
        for resource, action in grants:
            async with self.store.transaction() as tx:
                existing = await tx.permissions.find_by_name(f"{action.value}:{resource}")
            if existing is None:
                existing = await self.permission(resource, action)
            names.append(existing.name)
        async with self.store.transaction() as tx:
            return await tx.roles.create(name=name, is_active=is_active, permission_names=names)


@pytest.fixture
def user_factory(store, hasher) -> UserFactory:
    return UserFactory(store, hasher)


@pytest.fixture
def rbac_factory(store) -> RBACFactory:
    return RBACFactory(store)


@pytest_asyncio.fixture
async def admin_user(rbac_factory, user_factory) -> User:
    """User holding ``manage`` on every RBAC resource."""
    await rbac_factory.role(
        "admin",
        [(resource, PermissionAction.MANAGE) for resource in ("users", "roles", "permissions", "resources")],
    )
    return await user_factory.create(email="root@example.com", username="root", roles=["admin"])


@pytest_asyncio.fixture
async def test_user(user_factory) -> User:
    """User with no roles."""
    return await user_factory.create()


# ============ Auth Helpers ============


def auth_headers_for(tokens: TokenIssuer, user: User) -> dict[str, str]:
    """Helper to get auth headers for any user."""
    token = tokens.issue(user.id, user.email, user.username)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(tokens, admin_user) -> dict[str, str]:
    return auth_headers_for(tokens, admin_user)


@pytest.fixture
def user_headers(tokens, test_user) -> dict[str, str]:
    return auth_headers_for(tokens, test_user)
