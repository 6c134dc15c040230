"""Routing shell and layout."""

from hypercyber.shell.layout import NAV_LINKS, Layout
from hypercyber.shell.router import PUBLIC_ROUTES, Navigation, Route, Router

__all__ = ["Router", "Route", "Navigation", "PUBLIC_ROUTES", "Layout", "NAV_LINKS"]
