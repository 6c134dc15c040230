"""RGPD endpoints: processing register, access requests and breaches.

Collections can be addressed two ways by the backend:

- entity-scoped: ``/entities/{entity_id}/rgpd/<kind>`` (default)
- legacy query style: ``/rgpd/<kind>?entity_id=<id>``

Unscoped reads and item operations always go through ``/rgpd/<kind>``.
"""

from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter

from hypercyber.api.schemas import (
    AccessRequest,
    AccessRequestAnswer,
    AccessRequestCreate,
    Breach,
    BreachCreate,
    BreachUpdate,
    RegisterEntry,
    RegisterEntryCreate,
    RegisterEntryUpdate,
    RequestStatus,
    decode,
)
from hypercyber.client.errors import ValidationError
from hypercyber.client.http import ApiClient
from hypercyber.settings import RGPDRouteStyle, settings

_REGISTER_LIST = TypeAdapter(list[RegisterEntry])
_REQUEST_LIST = TypeAdapter(list[AccessRequest])
_BREACH_LIST = TypeAdapter(list[Breach])

REGISTER = "register"
ACCESS_REQUESTS = "access-requests"
BREACHES = "breaches"


class RGPDAPI:
    """Typed access to the RGPD collections of the backend.

    Attributes:
        route_style: Collection route style in use.
    """

    def __init__(self, client: ApiClient, route_style: RGPDRouteStyle | None = None) -> None:
        self._client = client
        self.route_style = route_style or settings.api.rgpd_routes

    # -------------------------------------------------------------------------
    # Route construction
    # -------------------------------------------------------------------------

    def collection_route(self, kind: str, entity_id: str | None) -> tuple[str, dict[str, str]]:
        """Path and query parameters of a (possibly entity-scoped) collection.

        Args:
            kind: One of ``register``, ``access-requests``, ``breaches``.
            entity_id: Scoping entity, or None for the unscoped collection.

        Returns:
            Tuple of (path, query params).
        """
        if entity_id is None:
            return f"/rgpd/{kind}", {}
        if self.route_style == RGPDRouteStyle.ENTITY_SCOPED:
            return f"/entities/{entity_id}/rgpd/{kind}", {}
        return f"/rgpd/{kind}", {"entity_id": entity_id}

    @staticmethod
    def item_route(kind: str, item_id: str) -> str:
        return f"/rgpd/{kind}/{item_id}"

    @staticmethod
    def _require_entity(entity_id: str | None) -> str:
        if not entity_id or not entity_id.strip():
            raise ValidationError(["entity_id"], "An entity must be selected")
        return entity_id

    # -------------------------------------------------------------------------
    # Register
    # -------------------------------------------------------------------------

    async def get_register(self, entity_id: str | None = None) -> list[RegisterEntry]:
        path, params = self.collection_route(REGISTER, entity_id)
        return decode(_REGISTER_LIST, await self._client.get(path, params=params))

    async def add_to_register(self, entity_id: str, **fields: Any) -> RegisterEntry:
        payload = RegisterEntryCreate.build(**fields)
        path, params = self.collection_route(REGISTER, self._require_entity(entity_id))
        data = await self._client.post(path, json=payload.to_create_body(), params=params)
        return decode(RegisterEntry, data)

    async def update_register_entry(self, entry_id: str, **changes: Any) -> RegisterEntry:
        payload = RegisterEntryUpdate.build(**changes)
        data = await self._client.put(self.item_route(REGISTER, entry_id), json=payload.to_update_body())
        return decode(RegisterEntry, data)

    # -------------------------------------------------------------------------
    # Access requests
    # -------------------------------------------------------------------------

    async def list_access_requests(self, entity_id: str | None = None) -> list[AccessRequest]:
        path, params = self.collection_route(ACCESS_REQUESTS, entity_id)
        return decode(_REQUEST_LIST, await self._client.get(path, params=params))

    async def create_access_request(self, entity_id: str, **fields: Any) -> AccessRequest:
        payload = AccessRequestCreate.build(**fields)
        path, params = self.collection_route(ACCESS_REQUESTS, self._require_entity(entity_id))
        data = await self._client.post(path, json=payload.to_create_body(), params=params)
        return decode(AccessRequest, data)

    async def get_access_request(self, request_id: str) -> AccessRequest:
        data = await self._client.get(self.item_route(ACCESS_REQUESTS, request_id))
        return decode(AccessRequest, data)

    async def respond_to_request(
        self,
        request_id: str,
        status: RequestStatus | str,
        response: str | None = None,
    ) -> AccessRequest:
        """Move a request out of ``pending`` with an optional answer text.

        Raises:
            ValidationError: If ``status`` is unknown or ``pending``.
        """
        payload = AccessRequestAnswer.build(status=status, response=response or None)
        if payload.status == RequestStatus.PENDING:
            raise ValidationError(["status"], "A response must move the request out of pending")
        path = f"{self.item_route(ACCESS_REQUESTS, request_id)}/respond"
        data = await self._client.post(path, json=payload.to_create_body())
        return decode(AccessRequest, data)

    # -------------------------------------------------------------------------
    # Breaches
    # -------------------------------------------------------------------------

    async def list_breaches(self, entity_id: str | None = None) -> list[Breach]:
        path, params = self.collection_route(BREACHES, entity_id)
        return decode(_BREACH_LIST, await self._client.get(path, params=params))

    async def create_breach(self, entity_id: str, **fields: Any) -> Breach:
        payload = BreachCreate.build(**fields)
        path, params = self.collection_route(BREACHES, self._require_entity(entity_id))
        data = await self._client.post(path, json=payload.to_create_body(), params=params)
        return decode(Breach, data)

    async def get_breach(self, breach_id: str) -> Breach:
        return decode(Breach, await self._client.get(self.item_route(BREACHES, breach_id)))

    async def update_breach(self, breach_id: str, **changes: Any) -> Breach:
        payload = BreachUpdate.build(**changes)
        data = await self._client.put(self.item_route(BREACHES, breach_id), json=payload.to_update_body())
        return decode(Breach, data)
