"""Navigation chrome around authenticated pages."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hypercyber.shell.router import Navigation, Route

if TYPE_CHECKING:
    from hypercyber.app import Console

NAV_LINKS: tuple[tuple[str, Route], ...] = (
    ("Dashboard", Route.DASHBOARD),
    ("Entities", Route.ENTITIES),
    ("Catalogue", Route.CATALOGUE),
    ("RGPD register", Route.RGPD_REGISTER),
    ("Access requests", Route.RGPD_REQUESTS),
    ("Breaches", Route.RGPD_BREACHES),
)


class Layout:
    BRAND = "HyperCyber"

    def __init__(self, console: Console) -> None:
        self._console = console

    def render(self, current: str | None = None) -> str:
        """Render the navigation bar, highlighting ``current``."""
        links = "  ".join(f"[{label}]" if route == current else label for label, route in NAV_LINKS)
        user = self._console.session.user
        who = user.email if user else ""
        return f"{self.BRAND} | {links} | {who}".rstrip(" |")

    async def logout(self) -> Navigation:
        """Sign out, drop every cached list and go to the login page."""
        self._console.session.logout()
        self._console.cache.clear()
        return await self._console.router.navigate(Route.LOGIN)
