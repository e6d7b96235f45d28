"""
Resource repository.
"""

from rbac_api.models import Resource

from .base import BaseRepository


class ResourceRepository(BaseRepository[Resource]):
    model = Resource
    entity_name = "Resource"

    async def create(
        self,
        *,
        name: str,
        description: str | None = None,
        is_active: bool = True,
    ) -> Resource:
        await self.ensure_name_available(name)
        return await self.add(Resource(name=name, description=description, is_active=is_active))

    async def update(
        self,
        resource: Resource,
        *,
        name: str | None = None,
        description: str | None = None,
        is_active: bool | None = None,
    ) -> Resource:
        if name is not None and name != resource.name:
            await self.ensure_name_available(name, exclude_id=resource.id)
        fields = {"name": name, "description": description, "is_active": is_active}
        return await self.apply(resource, {k: v for k, v in fields.items() if v is not None})
