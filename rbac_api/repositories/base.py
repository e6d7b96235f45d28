"""
Base repository with common operations.

Repositories only ever flush; commit and rollback belong to the transaction
that owns the session (see IdentityStore.transaction).
"""

from contextlib import contextmanager
from typing import Any, Generic, Iterator, Sequence, Type, TypeVar
from uuid import UUID

import structlog
from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_api.core.errors import ConflictError, InternalError, NotFoundError
from rbac_api.models.base import Base

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=Base)


@contextmanager
def translate_db_errors(conflict_message: str = "Already exists") -> Iterator[None]:
    """Map SQLAlchemy failures onto the application error taxonomy."""
    try:
        yield
    except IntegrityError as e:
        logger.info("db.integrity_violation", error=str(e.orig))
        raise ConflictError(conflict_message) from e
    except SQLAlchemyError as e:
        logger.error("db.error", error=str(e))
        raise InternalError("Database operation failed") from e


class BaseRepository(Generic[ModelT]):
    """
    Base repository providing common lookups and writes.

    Usage:
        class ResourceRepository(BaseRepository[Resource]):
            model = Resource
            entity_name = "Resource"

        repo = ResourceRepository(session)
        resource = await repo.get_by_id(resource_id)
    """

    model: Type[ModelT]
    entity_name: str = "Entity"

    def __init__(self, db: AsyncSession):
        self.db = db

    def _base_query(self) -> Select:
        """Base query - override to add default filters and eager loads."""
        return select(self.model)

    async def _one(self, stmt: Select) -> ModelT | None:
        with translate_db_errors():
            result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _all(self, stmt: Select) -> list[ModelT]:
        with translate_db_errors():
            result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, id: UUID) -> ModelT | None:
        """Get entity by ID."""
        return await self._one(self._base_query().where(self.model.id == id))

    async def require(self, id: UUID) -> ModelT:
        """Get entity by ID or raise NotFoundError."""
        entity = await self.get_by_id(id)
        if entity is None:
            raise NotFoundError.for_entity(self.entity_name, id)
        return entity

    async def find_by_name(self, name: str) -> ModelT | None:
        return await self._one(self._base_query().where(self.model.name == name))

    async def require_by_name(self, name: str) -> ModelT:
        entity = await self.find_by_name(name)
        if entity is None:
            raise NotFoundError.for_entity(self.entity_name, name)
        return entity

    async def list(self, is_active: bool | None = None) -> list[ModelT]:
        """All entities, newest first, optionally filtered by active flag."""
        stmt = self._base_query()
        if is_active is not None:
            stmt = stmt.where(self.model.is_active == is_active)
        return await self._all(stmt.order_by(self.model.created_at.desc()))

    async def ensure_name_available(self, name: str, exclude_id: UUID | None = None) -> None:
        """Fast-path uniqueness check; the unique constraint stays authoritative."""
        existing = await self.find_by_name(name)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError(f"{self.entity_name} with name '{name}' already exists")

    async def add(self, entity: ModelT) -> ModelT:
        self.db.add(entity)
        await self.flush(f"{self.entity_name} already exists")
        return entity

    async def apply(self, entity: ModelT, fields: dict[str, Any]) -> ModelT:
        """Set the given attributes and flush."""
        for field, value in fields.items():
            setattr(entity, field, value)
        await self.flush(f"{self.entity_name} already exists")
        return entity

    async def remove(self, entity: ModelT) -> None:
        """Hard delete."""
        await self.db.delete(entity)
        await self.flush()

    async def flush(self, conflict_message: str = "Already exists") -> None:
        with translate_db_errors(conflict_message):
            await self.db.flush()

    async def refresh(self, entity: ModelT, attribute_names: Sequence[str] | None = None) -> None:
        with translate_db_errors():
            await self.db.refresh(entity, attribute_names=attribute_names)
