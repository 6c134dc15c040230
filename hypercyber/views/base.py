"""Shared view scaffolding: error surfacing, cached lists, text tables.

A view owns its local form state, reads collections through the query
cache, and renders plain text. Errors raised by the API layer are caught
here, exposed as ``view.error`` and leave the view's state unchanged.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime
from typing import ClassVar, Generic, TypeVar

from hypercyber.api import EntitiesAPI
from hypercyber.api.schemas import Entity
from hypercyber.cache import QueryCache, QueryKey
from hypercyber.client.errors import ConsoleError
from hypercyber.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")

# Cache kinds shared between views that display the same collection.
ENTITIES = "entities"
RGPD_REGISTER = "rgpd-register"
RGPD_REQUESTS = "rgpd-requests"
RGPD_BREACHES = "rgpd-breaches"
CATALOGUE_ENDPOINTS = "catalogue-endpoints"
CATALOGUE_LICENSE_KEYS = "catalogue-license-keys"
CATALOGUE_SOFTWARE_VERSIONS = "catalogue-software-versions"
CATALOGUE_ENCRYPTION_ALGORITHMS = "catalogue-encryption-algorithms"
CATALOGUE_RELATIONS = "catalogue-relations"


# =============================================================================
# FORMATTING HELPERS
# =============================================================================


def split_list(text: str | None) -> list[str]:
    """Split a comma-separated input, trimming and dropping empties.

    Order is preserved: ``"email, name"`` -> ``["email", "name"]``.
    """
    if not text:
        return []
    return [part.strip() for part in text.split(",") if part.strip()]


def format_date(value: datetime | None) -> str:
    return value.strftime("%d/%m/%Y") if value else ""


def render_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Render rows as an aligned plain-text table."""
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    def line(cells: Sequence[str]) -> str:
        return " | ".join(cell.ljust(widths[i]) for i, cell in enumerate(cells)).rstrip()

    separator = "-+-".join("-" * w for w in widths)
    return "\n".join([line(headers), separator, *(line(row) for row in rows)])


# =============================================================================
# VIEWS
# =============================================================================


class View:
    """Base class: runs actions and surfaces their errors.

    Attributes:
        error: Message of the last failed action, or None.
    """

    title: ClassVar[str] = ""

    def __init__(self, cache: QueryCache) -> None:
        self._cache = cache
        self.error: str | None = None

    async def _run(self, action: Awaitable[R], name: str) -> R | None:
        """Await an action, capturing console errors into ``self.error``."""
        self.error = None
        try:
            return await action
        except ConsoleError as e:
            self.error = str(e)
            logger.warning("view_action_failed", view=type(self).__name__, action=name, error=str(e))
            return None


class ListView(View, ABC, Generic[T]):
    """A cached collection with a toggled creation form.

    Subclasses declare ``kind`` and ``headers`` and implement
    ``_load_items`` and ``row``.
    """

    kind: ClassVar[str]
    headers: ClassVar[tuple[str, ...]]
    empty_message: ClassVar[str] = "Nothing found."

    def __init__(self, cache: QueryCache) -> None:
        super().__init__(cache)
        self.show_create_form = False

    # -------------------------------------------------------------------------
    # Query
    # -------------------------------------------------------------------------

    def filters(self) -> dict[str, str | None]:
        """Scoping filters of the current query (none by default)."""
        return {}

    @property
    def query_key(self) -> QueryKey:
        return QueryKey.of(self.kind, **self.filters())

    @abstractmethod
    async def _load_items(self) -> list[T]: ...

    async def load(self, force: bool = False) -> list[T]:
        """Fetch the collection for the current filters."""
        await self._run(self._cache.fetch(self.query_key, self._load_items, force=force), "load")
        return self.items

    @property
    def items(self) -> list[T]:
        return self._cache.get(self.query_key) or []

    # -------------------------------------------------------------------------
    # Creation form
    # -------------------------------------------------------------------------

    def toggle_create_form(self) -> bool:
        self.show_create_form = not self.show_create_form
        return self.show_create_form

    def reset_form(self) -> None:
        """Restore the creation form to its defaults."""

    async def _mutate(self, action: Callable[[], Awaitable[R]], name: str) -> R | None:
        """Run a mutation; on success invalidate the kind and reset the form."""
        result = await self._run(action(), name)
        if self.error is not None:
            return None
        self._cache.invalidate(self.kind)
        self.show_create_form = False
        self.reset_form()
        return result

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    @abstractmethod
    def row(self, item: T) -> tuple[str, ...]: ...

    def render(self) -> str:
        parts = [self.title] if self.title else []
        if self.error:
            parts.append(f"Error: {self.error}")
        items = self.items
        parts.append(render_table(self.headers, [self.row(i) for i in items]) if items else self.empty_message)
        return "\n".join(parts)


class EntityScopedView(ListView[T]):
    """List view filtered by an optional entity, with an entity selector."""

    def __init__(self, cache: QueryCache, entities_api: EntitiesAPI) -> None:
        super().__init__(cache)
        self._entities_api = entities_api
        self.selected_entity: str | None = None

    def filters(self) -> dict[str, str | None]:
        return {"entity_id": self.selected_entity}

    def select_entity(self, entity_id: str | None) -> None:
        """Change the entity filter; the next ``load`` uses the new key."""
        self.selected_entity = entity_id or None

    async def load_entities(self) -> list[Entity]:
        """Options of the entity selector."""
        key = QueryKey.of(ENTITIES)
        await self._run(self._cache.fetch(key, self._entities_api.list), "load_entities")
        return self._cache.get(key) or []
