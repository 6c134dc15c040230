"""Entities page: list, create and rename organizational units."""

from dataclasses import dataclass

from hypercyber.api import EntitiesAPI
from hypercyber.api.schemas import Entity, EntityUser
from hypercyber.cache import QueryCache, QueryKey
from hypercyber.views.base import ENTITIES, ListView, format_date


@dataclass
class EntityForm:
    name: str = ""
    description: str = ""


class EntitiesView(ListView[Entity]):
    title = "Entities"
    kind = ENTITIES
    headers = ("Name", "Description", "Created")
    empty_message = "No entities found."

    def __init__(self, cache: QueryCache, entities_api: EntitiesAPI) -> None:
        super().__init__(cache)
        self._api = entities_api
        self.form = EntityForm()

    async def _load_items(self) -> list[Entity]:
        return await self._api.list()

    def reset_form(self) -> None:
        self.form = EntityForm()

    async def submit(self) -> Entity | None:
        """Create an entity from the form."""
        form = self.form
        return await self._mutate(
            lambda: self._api.create(form.name, form.description or None),
            "create",
        )

    async def update(self, entity_id: str, name: str | None = None, description: str | None = None) -> Entity | None:
        changes = {k: v for k, v in (("name", name), ("description", description)) if v is not None}
        return await self._mutate(lambda: self._api.update(entity_id, **changes), "update")

    async def members(self, entity_id: str) -> list[EntityUser]:
        """Users attached to an entity (cached per entity)."""
        key = QueryKey.of("entity-users", entity_id=entity_id)
        await self._run(self._cache.fetch(key, lambda: self._api.users(entity_id)), "members")
        return self._cache.get(key) or []

    def row(self, item: Entity) -> tuple[str, ...]:
        return (item.name, item.description or "", format_date(item.created_at))
