"""Organizational entity endpoints (``/entities``)."""

from __future__ import annotations

from pydantic import TypeAdapter

from hypercyber.api.schemas import Entity, EntityCreate, EntityUpdate, EntityUser, decode
from hypercyber.client.http import ApiClient

_ENTITY_LIST = TypeAdapter(list[Entity])
_USER_LIST = TypeAdapter(list[EntityUser])


class EntitiesAPI:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def list(self) -> list[Entity]:
        return decode(_ENTITY_LIST, await self._client.get("/entities"))

    async def get(self, entity_id: str) -> Entity:
        return decode(Entity, await self._client.get(f"/entities/{entity_id}"))

    async def create(self, name: str, description: str | None = None) -> Entity:
        payload = EntityCreate.build(name=name, description=description or None)
        data = await self._client.post("/entities", json=payload.to_create_body())
        return decode(Entity, data)

    async def update(self, entity_id: str, **changes: str | None) -> Entity:
        """Partially update an entity; only the given fields are sent."""
        payload = EntityUpdate.build(**changes)
        data = await self._client.put(f"/entities/{entity_id}", json=payload.to_update_body())
        return decode(Entity, data)

    async def users(self, entity_id: str) -> list[EntityUser]:
        return decode(_USER_LIST, await self._client.get(f"/entities/{entity_id}/users"))
