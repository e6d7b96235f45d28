"""
IdentityStore - transactional access to users, roles, permissions and resources.

Workflows open one transaction per operation and pass it explicitly to every
step, so atomicity is owned by the caller rather than by whatever session a
repository happens to hold.

Usage:
    async with store.transaction() as tx:
        user = await tx.users.create_user(...)
        ...
    # committed here; any exception inside the block rolls everything back
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rbac_api.core.auth.evaluator import Principal
from rbac_api.models import User

from .base import translate_db_errors
from .permissions import PermissionRepository
from .resources import ResourceRepository
from .roles import RoleRepository
from .users import UserRepository


@dataclass
class IdentityTransaction:
    """The four repositories bound to one session and one transaction."""

    session: AsyncSession
    users: UserRepository
    roles: RoleRepository
    permissions: PermissionRepository
    resources: ResourceRepository

    @classmethod
    def for_session(cls, session: AsyncSession) -> "IdentityTransaction":
        return cls(
            session=session,
            users=UserRepository(session),
            roles=RoleRepository(session),
            permissions=PermissionRepository(session),
            resources=ResourceRepository(session),
        )


class IdentityStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[IdentityTransaction]:
        """Commit on normal exit, roll back on any exception."""
        async with self.session_factory() as session:
            with translate_db_errors():
                async with session.begin():
                    yield IdentityTransaction.for_session(session)

    @asynccontextmanager
    async def _use(self, tx: IdentityTransaction | None) -> AsyncIterator[IdentityTransaction]:
        if tx is not None:
            yield tx
        else:
            async with self.transaction() as own:
                yield own

    # Convenience readers: join the caller's transaction or run in their own

    async def find_user_by_email(self, email: str, tx: IdentityTransaction | None = None) -> User | None:
        async with self._use(tx) as t:
            return await t.users.find_by_email(email)

    async def find_user_by_username(self, username: str, tx: IdentityTransaction | None = None) -> User | None:
        async with self._use(tx) as t:
            return await t.users.find_by_username(username)

    async def get_user(self, user_id: UUID, tx: IdentityTransaction | None = None) -> User | None:
        async with self._use(tx) as t:
            return await t.users.get_by_id(user_id)

    async def load_principal(self, user_id: UUID, tx: IdentityTransaction | None = None) -> Principal | None:
        async with self._use(tx) as t:
            return await t.users.load_principal(user_id)
