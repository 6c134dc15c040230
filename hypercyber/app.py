"""Application container: builds and wires every console component.

Usage:
    async with Console() as console:
        await console.start()
        nav = await console.router.navigate("/rgpd/requests")
        await nav.view.load()
        print(nav.view.render())
"""

from pathlib import Path
from types import TracebackType
from typing import Any

import httpx

from hypercyber.api import RGPDAPI, AuthAPI, CatalogueAPI, EntitiesAPI
from hypercyber.cache import QueryCache
from hypercyber.client.http import ApiClient
from hypercyber.session import AuthSession, CredentialStore, SessionState
from hypercyber.settings import RGPDRouteStyle
from hypercyber.shell import Layout, Route, Router
from hypercyber.utils.logger import get_logger
from hypercyber.views import (
    BreachesView,
    CatalogueView,
    DashboardView,
    EntitiesView,
    LoginView,
    RegisterView,
    RequestsView,
)

logger = get_logger(__name__)


class Console:
    """Explicitly wired console: client, APIs, session, cache, views, shell.

    Attributes:
        store: Durable credential storage.
        client: HTTP adapter shared by every API module.
        session: Authentication state.
        cache: Query cache shared by every view.
        views: Route to view mapping (rebuilt on reload).
        router: URL resolution and auth gate.
        layout: Navigation chrome.
    """

    def __init__(
        self,
        base_url: str | None = None,
        credentials_file: Path | None = None,
        route_style: RGPDRouteStyle | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Build every component.

        Args:
            base_url: Overrides settings.api.base_url.
            credentials_file: Overrides settings.paths.credentials_file.
            route_style: Overrides settings.api.rgpd_routes.
            transport: Custom HTTP transport (tests).
        """
        self.store = CredentialStore(credentials_file)
        self.client = ApiClient(lambda: self.store.token, base_url=base_url, transport=transport)

        self.auth_api = AuthAPI(self.client)
        self.entities_api = EntitiesAPI(self.client)
        self.rgpd_api = RGPDAPI(self.client, route_style)
        self.catalogue_api = CatalogueAPI(self.client)

        self.session = AuthSession(self.auth_api, self.store)
        self.cache = QueryCache()
        self.views: dict[Route, Any] = self._build_views()

        self.router = Router(self)
        self.layout = Layout(self)

    def _build_views(self) -> dict[Route, Any]:
        return {
            Route.LOGIN: LoginView(self.cache, self.session, self.auth_api),
            Route.DASHBOARD: DashboardView(self.cache, self.entities_api, self.rgpd_api),
            Route.ENTITIES: EntitiesView(self.cache, self.entities_api),
            Route.CATALOGUE: CatalogueView(self.cache, self.catalogue_api),
            Route.RGPD_REGISTER: RegisterView(self.cache, self.entities_api, self.rgpd_api),
            Route.RGPD_REQUESTS: RequestsView(self.cache, self.entities_api, self.rgpd_api),
            Route.RGPD_BREACHES: BreachesView(self.cache, self.entities_api, self.rgpd_api),
        }

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> SessionState:
        """Restore the session from durable storage."""
        state = await self.session.init()
        logger.debug("console_started", state=state)
        return state

    async def reload(self) -> SessionState:
        """Full reload: drop all cached data and view state, restore the session."""
        self.cache.clear()
        self.views = self._build_views()
        return await self.start()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "Console":
        return self

    async def __aexit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()
