"""Dashboard: headline counters over every RGPD collection."""

import asyncio
from dataclasses import dataclass

from hypercyber.api import RGPDAPI, EntitiesAPI
from hypercyber.api.schemas import AccessRequest, Breach, Entity, RegisterEntry, RequestStatus
from hypercyber.cache import QueryCache, QueryKey
from hypercyber.client.errors import ConsoleError
from hypercyber.utils.logger import get_logger
from hypercyber.views.base import ENTITIES, RGPD_BREACHES, RGPD_REGISTER, RGPD_REQUESTS, View

logger = get_logger(__name__)


@dataclass(frozen=True)
class DashboardStats:
    entities: int = 0
    register_entries: int = 0
    pending_requests: int = 0
    active_breaches: int = 0


class DashboardView(View):
    """Four independent unscoped queries, loaded concurrently.

    Each query fills its own cache entry, so a failing one leaves the
    others' counters intact.
    """

    title = "Dashboard"

    def __init__(self, cache: QueryCache, entities_api: EntitiesAPI, rgpd_api: RGPDAPI) -> None:
        super().__init__(cache)
        self._entities_api = entities_api
        self._rgpd_api = rgpd_api

    async def load(self, force: bool = False) -> DashboardStats:
        self.error = None
        results = await asyncio.gather(
            self._cache.fetch(QueryKey.of(ENTITIES), self._entities_api.list, force=force),
            self._cache.fetch(QueryKey.of(RGPD_REGISTER), self._rgpd_api.get_register, force=force),
            self._cache.fetch(QueryKey.of(RGPD_REQUESTS), self._rgpd_api.list_access_requests, force=force),
            self._cache.fetch(QueryKey.of(RGPD_BREACHES), self._rgpd_api.list_breaches, force=force),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, ConsoleError):
                self.error = str(result)
                logger.warning("dashboard_query_failed", error=str(result))
            elif isinstance(result, BaseException):
                raise result
        return self.stats

    @property
    def stats(self) -> DashboardStats:
        entities: list[Entity] = self._cache.get(QueryKey.of(ENTITIES)) or []
        register: list[RegisterEntry] = self._cache.get(QueryKey.of(RGPD_REGISTER)) or []
        requests: list[AccessRequest] = self._cache.get(QueryKey.of(RGPD_REQUESTS)) or []
        breaches: list[Breach] = self._cache.get(QueryKey.of(RGPD_BREACHES)) or []
        return DashboardStats(
            entities=len(entities),
            register_entries=len(register),
            pending_requests=sum(1 for r in requests if r.status == RequestStatus.PENDING),
            active_breaches=sum(1 for b in breaches if b.is_active),
        )

    def render(self) -> str:
        stats = self.stats
        lines = [
            self.title,
            f"  Entities            {stats.entities}",
            f"  Register entries    {stats.register_entries}",
            f"  Pending requests    {stats.pending_requests}",
            f"  Active breaches     {stats.active_breaches}",
        ]
        if self.error:
            lines.insert(1, f"Error: {self.error}")
        return "\n".join(lines)
