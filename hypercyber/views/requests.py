"""Data-subject access requests page."""

from dataclasses import dataclass

from hypercyber.api import RGPDAPI, EntitiesAPI
from hypercyber.api.schemas import AccessRequest, RequestStatus, RequestType
from hypercyber.cache import QueryCache
from hypercyber.client.errors import ValidationError
from hypercyber.views.base import RGPD_REQUESTS, EntityScopedView, format_date

RESPOND = "respond"

# Outcomes offered when answering a pending request.
RESPONSE_STATUSES = (RequestStatus.COMPLETED, RequestStatus.REJECTED)


@dataclass
class AccessRequestForm:
    requester_name: str = ""
    requester_email: str = ""
    request_type: RequestType = RequestType.ACCESS
    description: str = ""


class RequestsView(EntityScopedView[AccessRequest]):
    title = "RGPD access requests"
    kind = RGPD_REQUESTS
    headers = ("Id", "Requester", "Email", "Type", "Status", "Date")
    empty_message = "No requests found."

    def __init__(self, cache: QueryCache, entities_api: EntitiesAPI, rgpd_api: RGPDAPI) -> None:
        super().__init__(cache, entities_api)
        self._api = rgpd_api
        self.form = AccessRequestForm()

    async def _load_items(self) -> list[AccessRequest]:
        return await self._api.list_access_requests(self.selected_entity)

    def reset_form(self) -> None:
        self.form = AccessRequestForm()

    def pending(self) -> list[AccessRequest]:
        return [r for r in self.items if r.status == RequestStatus.PENDING]

    @staticmethod
    def actions(request: AccessRequest) -> list[str]:
        """Actions offered for a row: only pending requests can be answered."""
        return [RESPOND] if request.is_pending else []

    async def submit(self) -> AccessRequest | None:
        entity_id = self.selected_entity or ""
        form = self.form
        return await self._mutate(
            lambda: self._api.create_access_request(
                entity_id,
                requester_name=form.requester_name,
                requester_email=form.requester_email,
                request_type=form.request_type,
                description=form.description or None,
            ),
            "create",
        )

    async def respond(
        self,
        request_id: str,
        status: RequestStatus | str,
        response: str | None = None,
    ) -> AccessRequest | None:
        """Answer a pending request with ``completed`` or ``rejected``."""
        return await self._mutate(lambda: self._respond(request_id, status, response), "respond")

    async def _respond(self, request_id: str, status: RequestStatus | str, response: str | None) -> AccessRequest:
        if status not in RESPONSE_STATUSES:
            raise ValidationError(["status"], f"Response status must be one of: {', '.join(RESPONSE_STATUSES)}")
        current = next((r for r in self.items if r.id == request_id), None)
        if current is None:
            current = await self._api.get_access_request(request_id)
        if RESPOND not in self.actions(current):
            raise ValidationError(["status"], f"Request {request_id} is already {current.status}")
        return await self._api.respond_to_request(request_id, status, response)

    def row(self, item: AccessRequest) -> tuple[str, ...]:
        return (
            item.id,
            item.requester_name,
            item.requester_email,
            item.request_type,
            item.status,
            format_date(item.created_at),
        )
