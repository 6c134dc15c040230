"""Integration tests for data-subject access requests."""

from __future__ import annotations

import pytest

from hypercyber.api.schemas import RequestStatus, RequestType
from hypercyber.shell import Route
from hypercyber.views.requests import RESPOND


async def _requests_page(console, entity_id: str | None = None):
    view = (await console.router.navigate(Route.RGPD_REQUESTS)).view
    view.select_entity(entity_id)
    return view


def _seed_request(backend, entity_id: str, **fields) -> dict:
    return backend.add_record(
        "access-requests",
        entity_id,
        requester_name=fields.pop("requester_name", "Bob"),
        requester_email=fields.pop("requester_email", "bob@example.com"),
        **fields,
    )


class TestCreateRequest:
    @staticmethod
    async def test_new_request_is_pending(auth_console, acme) -> None:
        view = await _requests_page(auth_console, acme["id"])
        view.form.requester_name = "Bob"
        view.form.requester_email = "bob@example.com"
        view.form.request_type = RequestType.ERASURE

        request = await view.submit()

        assert request.status == RequestStatus.PENDING
        assert request.request_type == RequestType.ERASURE
        assert [r.id for r in await view.load()] == [request.id]
        assert view.pending() == view.items

    @staticmethod
    async def test_blank_email_rejected(auth_console, acme) -> None:
        view = await _requests_page(auth_console, acme["id"])
        view.form.requester_name = "Bob"

        assert await view.submit() is None
        assert "requester_email" in view.error


class TestRespond:
    @staticmethod
    async def test_respond_moves_request_out_of_pending(auth_console, backend, acme) -> None:
        record = _seed_request(backend, acme["id"])
        view = await _requests_page(auth_console, acme["id"])
        [request] = await view.load()
        assert view.actions(request) == [RESPOND]

        answered = await view.respond(record["id"], RequestStatus.COMPLETED, "Data export sent")

        assert answered.status == RequestStatus.COMPLETED
        assert answered.response == "Data export sent"
        assert answered.completed_at is not None

        items = await view.load()
        assert view.pending() == []
        assert view.actions(items[0]) == []

    @staticmethod
    async def test_rejection_without_response_text(auth_console, backend, acme) -> None:
        record = _seed_request(backend, acme["id"])
        view = await _requests_page(auth_console, acme["id"])
        await view.load()

        answered = await view.respond(record["id"], "rejected")

        assert answered.status == RequestStatus.REJECTED
        assert answered.response is None
        body_calls = backend.requests_to("POST", f"/rgpd/access-requests/{record['id']}/respond")
        assert len(body_calls) == 1

    @staticmethod
    async def test_answered_request_cannot_be_answered_again(auth_console, backend, acme) -> None:
        record = _seed_request(backend, acme["id"], status="completed")
        view = await _requests_page(auth_console, acme["id"])
        await view.load()

        assert await view.respond(record["id"], RequestStatus.REJECTED) is None

        assert "already completed" in view.error
        assert backend.requests_to("POST", "/rgpd/access-requests") == []

    @staticmethod
    async def test_request_outside_loaded_list_is_fetched(auth_console, backend, acme) -> None:
        record = _seed_request(backend, acme["id"])
        view = await _requests_page(auth_console)

        answered = await view.respond(record["id"], RequestStatus.COMPLETED)

        assert answered.status == RequestStatus.COMPLETED
        assert ("GET", f"/rgpd/access-requests/{record['id']}", {}) in backend.calls

    @staticmethod
    @pytest.mark.parametrize("status", ["pending", "in_progress"])
    async def test_only_final_statuses_offered(auth_console, backend, acme, status: str) -> None:
        record = _seed_request(backend, acme["id"])
        view = await _requests_page(auth_console, acme["id"])
        await view.load()

        assert await view.respond(record["id"], status) is None
        assert "status" in view.error.lower()
        assert view.pending()[0].id == record["id"]

    @staticmethod
    async def test_backend_conflict_surfaced(auth_console, backend, acme) -> None:
        record = _seed_request(backend, acme["id"])
        view = await _requests_page(auth_console, acme["id"])
        await view.load()
        backend.failures[("POST", f"/rgpd/access-requests/{record['id']}/respond")] = (
            409,
            {"message": "Request locked"},
        )

        assert await view.respond(record["id"], RequestStatus.COMPLETED) is None
        assert "Request locked" in view.error
        assert len(view.pending()) == 1
