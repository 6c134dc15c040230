"""Shared pytest fixtures: in-memory backend, HTTP client, console.

The backend is a plain Python object served through ``httpx.MockTransport``
so every test exercises the real client, API modules, cache and views
without a network.
"""

from __future__ import annotations

import itertools
import json
import os
import re
import tempfile
from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

# Settings are read at import time: isolate them before importing the package.
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_TO_FILE"] = "false"
os.environ.setdefault("HYPERCYBER_HOME", tempfile.mkdtemp(prefix="hypercyber-tests-"))

import httpx  # noqa: E402
import jwt  # noqa: E402
import pytest  # noqa: E402

from hypercyber.app import Console  # noqa: E402
from hypercyber.client.http import ApiClient  # noqa: E402
from hypercyber.session import CredentialStore  # noqa: E402

BASE_URL = "http://backend.test/api"
JWT_SECRET = "test_jwt_secret_key_12345678901234567890"

ALICE_EMAIL = "alice@example.com"
ALICE_PASSWORD = "correct-horse"


# ---------------------------------------------------------------------------
# In-memory backend
# ---------------------------------------------------------------------------


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _json(status: int, body: Any = None) -> httpx.Response:
    if body is None:
        return httpx.Response(status)
    return httpx.Response(status, json=body)


class FakeBackend:
    """Minimal HyperCyber REST backend keeping its records in dicts.

    Attributes:
        calls: ``(method, path, query params)`` of every request received.
        failures: ``(method, path)`` -> ``(status, body)`` forced answers.
        upload_failure: ``(status, body)`` answered to every file upload.
    """

    RGPD_KINDS = ("register", "access-requests", "breaches")
    CATALOGUE_KINDS = ("endpoints", "license-keys", "software-versions", "encryption-algorithms")

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self.calls: list[tuple[str, str, dict[str, str]]] = []
        self.failures: dict[tuple[str, str], tuple[int, Any]] = {}
        self.upload_failure: tuple[int, Any] | None = None

        self.users: dict[str, dict[str, Any]] = {}
        self.passwords: dict[str, str] = {}
        self.tokens: dict[str, str] = {}
        self.refresh_tokens: dict[str, str] = {}

        self.entities: dict[str, dict[str, Any]] = {}
        self.memberships: list[dict[str, Any]] = []
        self.rgpd: dict[str, dict[str, dict[str, Any]]] = {kind: {} for kind in self.RGPD_KINDS}
        self.catalogue: dict[str, dict[str, dict[str, Any]]] = {kind: {} for kind in self.CATALOGUE_KINDS}
        self.relations: dict[str, dict[str, Any]] = {}

        self.add_user(ALICE_EMAIL, ALICE_PASSWORD, first_name="Alice", last_name="Martin")

    # -- seeding ------------------------------------------------------------

    def next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    def add_user(self, email: str, password: str, **names: str | None) -> dict[str, Any]:
        user = {"id": self.next_id("user"), "email": email, **names}
        self.users[email] = user
        self.passwords[email] = password
        return user

    def issue_tokens(self, email: str) -> tuple[str, str]:
        user = self.users[email]
        token = jwt.encode(
            {
                "sub": user["id"],
                "email": email,
                "exp": datetime.now(UTC) + timedelta(hours=1),
                "jti": self.next_id("jti"),
            },
            JWT_SECRET,
            algorithm="HS256",
        )
        refresh_token = self.next_id("refresh")
        self.tokens[token] = email
        self.refresh_tokens[refresh_token] = email
        return token, refresh_token

    def add_entity(self, name: str, description: str | None = None) -> dict[str, Any]:
        entity = {
            "id": self.next_id("ent"),
            "name": name,
            "description": description,
            "created_at": _now(),
            "updated_at": _now(),
        }
        self.entities[entity["id"]] = entity
        return entity

    def add_record(self, kind: str, entity_id: str, **fields: Any) -> dict[str, Any]:
        record = self._new_rgpd_record(kind, entity_id, fields)
        self.rgpd[kind][record["id"]] = record
        return record

    # -- transport ----------------------------------------------------------

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api")
        params = dict(request.url.params)
        self.calls.append((request.method, path, params))

        forced = self.failures.get((request.method, path))
        if forced is not None:
            return _json(*forced)

        if path.startswith("/auth/") and path != "/auth/me":
            return self._auth(request, path)

        email = self._bearer_user(request)
        if email is None:
            return _json(401, {"error": "Invalid or missing token"})
        if path == "/auth/me":
            return _json(200, self.users[email])
        if path.startswith("/entities"):
            return self._entities(request, path, params)
        if path.startswith("/rgpd/"):
            return self._rgpd(request, path, params, entity_id=params.get("entity_id"))
        if path.startswith("/catalogue/relations"):
            return self._relations(request, path, params)
        if path.startswith("/catalogue/"):
            return self._catalogue(request, path, params)
        return _json(404, {"error": f"No route {path}"})

    def requests_to(self, method: str, prefix: str) -> list[tuple[str, str, dict[str, str]]]:
        return [c for c in self.calls if c[0] == method and c[1].startswith(prefix)]

    # -- handlers -----------------------------------------------------------

    def _bearer_user(self, request: httpx.Request) -> str | None:
        header = request.headers.get("Authorization", "")
        if not header.startswith("Bearer "):
            return None
        return self.tokens.get(header.removeprefix("Bearer "))

    def _auth(self, request: httpx.Request, path: str) -> httpx.Response:
        body = _body(request)
        if path == "/auth/login":
            email = body.get("email")
            if email not in self.users or self.passwords[email] != body.get("password"):
                return _json(401, {"error": "Invalid credentials"})
            return self._auth_response(email)
        if path == "/auth/register":
            email = body["email"]
            if email in self.users:
                return _json(409, {"error": "Email already registered"})
            self.add_user(email, body["password"], first_name=body.get("first_name"), last_name=body.get("last_name"))
            return self._auth_response(email, status=201)
        if path == "/auth/refresh":
            email = self.refresh_tokens.get(body.get("refresh_token", ""))
            if email is None:
                return _json(401, {"error": "Invalid refresh token"})
            token, _ = self.issue_tokens(email)
            return _json(200, {"token": token})
        return _json(404, {"error": f"No route {path}"})

    def _auth_response(self, email: str, status: int = 200) -> httpx.Response:
        token, refresh_token = self.issue_tokens(email)
        return _json(status, {"token": token, "refresh_token": refresh_token, "user": self.users[email]})

    def _entities(self, request: httpx.Request, path: str, params: dict[str, str]) -> httpx.Response:
        scoped = re.fullmatch(r"/entities/([^/]+)/rgpd/(.+)", path)
        if scoped:
            entity_id, rest = scoped.groups()
            if entity_id not in self.entities:
                return _json(404, {"error": "Entity not found"})
            return self._rgpd(request, f"/rgpd/{rest}", params, entity_id=entity_id)

        if path == "/entities":
            if request.method == "GET":
                return _json(200, list(self.entities.values()))
            body = _body(request)
            return _json(201, self.add_entity(body["name"], body.get("description")))

        users = re.fullmatch(r"/entities/([^/]+)/users", path)
        if users:
            entity_id = users.group(1)
            return _json(200, [m for m in self.memberships if m["entity_id"] == entity_id])

        entity = self.entities.get(path.removeprefix("/entities/"))
        if entity is None:
            return _json(404, {"error": "Entity not found"})
        if request.method == "PUT":
            entity.update(_body(request), updated_at=_now())
        return _json(200, entity)

    def _rgpd(
        self,
        request: httpx.Request,
        path: str,
        params: dict[str, str],
        entity_id: str | None,
    ) -> httpx.Response:
        parts = path.removeprefix("/rgpd/").split("/")
        kind = parts[0]
        if kind not in self.rgpd:
            return _json(404, {"error": f"Unknown collection {kind}"})
        records = self.rgpd[kind]

        if len(parts) == 1:
            if request.method == "GET":
                items = [r for r in records.values() if entity_id is None or r["entity_id"] == entity_id]
                return _json(200, items)
            if entity_id is None:
                return _json(400, {"error": "entity_id is required"})
            body = _body(request)
            if naive := _naive_dates(body):
                return _json(422, {"error": f"Timestamps need an offset: {', '.join(naive)}"})
            record = self._new_rgpd_record(kind, entity_id, body)
            records[record["id"]] = record
            return _json(201, record)

        record = records.get(parts[1])
        if record is None:
            return _json(404, {"error": "Not found"})
        if len(parts) == 3 and parts[2] == "respond":
            if record["status"] != "pending":
                return _json(409, {"error": "Request already answered"})
            body = _body(request)
            record.update(status=body["status"], response=body.get("response"), completed_at=_now())
            return _json(200, record)
        if request.method == "PUT":
            body = _body(request)
            if naive := _naive_dates(body):
                return _json(422, {"error": f"Timestamps need an offset: {', '.join(naive)}"})
            record.update(body, updated_at=_now())
        return _json(200, record)

    def _new_rgpd_record(self, kind: str, entity_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        defaults: dict[str, Any] = {
            "register": {"data_categories": [], "data_subjects": [], "recipients": []},
            "access-requests": {"request_type": "access", "status": "pending"},
            "breaches": {
                "data_categories_affected": [],
                "severity": "medium",
                "status": "detected",
                "authority_notified": False,
                "subjects_notified": False,
            },
        }[kind]
        return {
            **defaults,
            **fields,
            "id": self.next_id(kind),
            "entity_id": entity_id,
            "created_at": _now(),
            "updated_at": _now(),
        }

    def _catalogue(self, request: httpx.Request, path: str, params: dict[str, str]) -> httpx.Response:
        parts = path.removeprefix("/catalogue/").split("/")
        kind = parts[0]
        if kind not in self.catalogue:
            return _json(404, {"error": f"Unknown collection {kind}"})
        records = self.catalogue[kind]

        if len(parts) == 1:
            if request.method == "GET":
                items = list(records.values())
                if params.get("endpoint_type"):
                    items = [i for i in items if i.get("endpoint_type") == params["endpoint_type"]]
                return _json(200, items)
            body = _body(request)
            if naive := _naive_dates(body):
                return _json(422, {"error": f"Timestamps need an offset: {', '.join(naive)}"})
            record = {**body, "id": self.next_id(kind), "created_at": _now(), "updated_at": _now()}
            records[record["id"]] = record
            return _json(201, record)

        record = records.get(parts[1])
        if record is None:
            return _json(404, {"error": "Not found"})
        if len(parts) == 3 and parts[2] == "upload":
            if self.upload_failure is not None:
                return _json(*self.upload_failure)
            match = re.search(rb'filename="([^"]+)"', request.content)
            if match is None:
                return _json(400, {"error": "No file"})
            file_name = match.group(1).decode()
            record.update(
                file_name=file_name,
                file_path=f"license-keys/{record['id']}/{file_name}",
                file_size=len(request.content),
                storage_type="local",
                updated_at=_now(),
            )
            return _json(200, record)
        if request.method == "PUT":
            record.update(_body(request), updated_at=_now())
        return _json(200, record)

    def _relations(self, request: httpx.Request, path: str, params: dict[str, str]) -> httpx.Response:
        if path == "/catalogue/relations":
            if request.method == "GET":
                items = [
                    r
                    for r in self.relations.values()
                    if r["source_id"] == params.get("source_id") and r["source_type"] == params.get("source_type")
                ]
                return _json(200, items)
            relation = {**_body(request), "id": self.next_id("rel"), "created_at": _now()}
            relation.setdefault("description", None)
            self.relations[relation["id"]] = relation
            return _json(201, relation)

        relation_id = path.removeprefix("/catalogue/relations/")
        if self.relations.pop(relation_id, None) is None:
            return _json(404, {"error": "Relation not found"})
        return _json(204)


def _body(request: httpx.Request) -> dict[str, Any]:
    return json.loads(request.content) if request.content else {}


_TIMESTAMP_FIELDS = ("breach_date", "discovery_date", "notification_date", "expires_at", "release_date", "end_of_life")


def _naive_dates(body: dict[str, Any]) -> list[str]:
    """Timestamp fields sent without a UTC offset."""
    return [
        name
        for name in _TIMESTAMP_FIELDS
        if isinstance(body.get(name), str) and datetime.fromisoformat(body[name]).tzinfo is None
    ]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def alice() -> tuple[str, str]:
    """Email and password of the seeded user."""
    return ALICE_EMAIL, ALICE_PASSWORD


@pytest.fixture
def transport(backend: FakeBackend) -> httpx.MockTransport:
    return httpx.MockTransport(backend.handle)


@pytest.fixture
def credentials_file(tmp_path: Path) -> Path:
    return tmp_path / "data" / "credentials.json"


@pytest.fixture
def store(credentials_file: Path) -> CredentialStore:
    return CredentialStore(credentials_file)


@pytest.fixture
async def client(store: CredentialStore, transport: httpx.MockTransport) -> AsyncGenerator[ApiClient, None]:
    """ApiClient reading its bearer token from ``store``."""
    async with ApiClient(lambda: store.token, base_url=BASE_URL, transport=transport) as c:
        yield c


@pytest.fixture
def logged_in_store(store: CredentialStore, backend: FakeBackend) -> CredentialStore:
    """Store holding a valid token pair for Alice."""
    store.save(*backend.issue_tokens(ALICE_EMAIL))
    return store


@pytest.fixture
def make_console(
    credentials_file: Path,
    transport: httpx.MockTransport,
) -> Callable[..., Console]:
    """Factory building consoles that share the backend and credentials file."""

    def _make(**overrides: Any) -> Console:
        kwargs: dict[str, Any] = {"base_url": BASE_URL, "credentials_file": credentials_file, "transport": transport}
        kwargs.update(overrides)
        return Console(**kwargs)

    return _make


@pytest.fixture
async def console(make_console: Callable[..., Console]) -> AsyncGenerator[Console, None]:
    """Started console with an anonymous session."""
    async with make_console() as c:
        await c.start()
        yield c


@pytest.fixture
async def auth_console(console: Console) -> Console:
    """Console logged in as Alice."""
    await console.session.login(ALICE_EMAIL, ALICE_PASSWORD)
    return console
