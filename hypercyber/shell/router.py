"""Route table, authentication gate and federated-login callback."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import httpx

from hypercyber.utils.logger import get_logger

if TYPE_CHECKING:
    from hypercyber.app import Console

logger = get_logger(__name__)

_MAX_REDIRECTS = 3


class Route(StrEnum):
    LOGIN = "/login"
    OIDC_CALLBACK = "/auth/callback"
    DASHBOARD = "/"
    ENTITIES = "/entities"
    CATALOGUE = "/catalogue"
    RGPD_REGISTER = "/rgpd/register"
    RGPD_REQUESTS = "/rgpd/requests"
    RGPD_BREACHES = "/rgpd/breaches"


PUBLIC_ROUTES = frozenset({Route.LOGIN, Route.OIDC_CALLBACK})


@dataclass(frozen=True)
class Navigation:
    """Outcome of a navigation.

    Attributes:
        path: Route finally displayed.
        view: View bound to that route.
        redirected_from: Requested path, when redirected.
        reloaded: Whether the console was fully re-initialized on the way.
    """

    path: str
    view: Any
    redirected_from: str | None = None
    reloaded: bool = False


class Router:
    """Resolves URLs to views, gating private routes behind the session."""

    def __init__(self, console: Console) -> None:
        self._console = console

    async def navigate(self, url: str) -> Navigation:
        """Resolve ``url`` (path plus optional query string) to a view.

        Args:
            url: Console URL, e.g. ``/rgpd/requests`` or
                ``/auth/callback?token=...&refresh_token=...``.

        Returns:
            Final navigation after following redirects.
        """
        requested = url
        reloaded = False
        for _ in range(_MAX_REDIRECTS):
            target, did_reload = await self._resolve(url)
            reloaded = reloaded or did_reload
            if isinstance(target, Route):
                redirected_from = requested if _path_of(requested) != target.value else None
                return Navigation(
                    path=target.value,
                    view=self._console.views[target],
                    redirected_from=redirected_from,
                    reloaded=reloaded,
                )
            url = target
        raise RuntimeError(f"Too many redirects while resolving {requested}")

    async def _resolve(self, url: str) -> tuple[Route | str, bool]:
        """Return either the route to display or a path to redirect to."""
        parsed = httpx.URL(url)
        path = _path_of(url)

        if path == Route.OIDC_CALLBACK:
            return await self._oidc_callback(parsed.params)

        try:
            route = Route(path)
        except ValueError:
            logger.info("unknown_route", path=path)
            return Route.DASHBOARD.value, False

        if route not in PUBLIC_ROUTES and not self._console.session.is_authenticated:
            return Route.LOGIN.value, False
        return route, False

    async def _oidc_callback(self, params: httpx.QueryParams) -> tuple[str, bool]:
        """Complete federated login from the landing URL's query string.

        Both ``token`` and ``refresh_token`` must be present; they are
        persisted and the whole console is reloaded so every component
        starts from the new session. Otherwise the user is sent back to
        the login page and nothing is stored.
        """
        token = params.get("token")
        refresh_token = params.get("refresh_token")
        if not token or not refresh_token:
            logger.info("oidc_callback_incomplete", has_token=bool(token), has_refresh=bool(refresh_token))
            return Route.LOGIN.value, False

        self._console.session.accept_tokens(token, refresh_token)
        await self._console.reload()
        return Route.DASHBOARD.value, True


def _path_of(url: str) -> str:
    return httpx.URL(url).path.rstrip("/") or "/"
