"""View components, one per console page."""

from hypercyber.views.base import ListView, View, render_table, split_list
from hypercyber.views.breaches import BreachesView
from hypercyber.views.catalogue import CatalogueTab, CatalogueView, RelationsPanel
from hypercyber.views.dashboard import DashboardStats, DashboardView
from hypercyber.views.entities import EntitiesView
from hypercyber.views.login import LoginMode, LoginView
from hypercyber.views.register import RegisterView
from hypercyber.views.requests import RequestsView

__all__ = [
    "View",
    "ListView",
    "render_table",
    "split_list",
    "DashboardView",
    "DashboardStats",
    "EntitiesView",
    "RegisterView",
    "RequestsView",
    "BreachesView",
    "CatalogueView",
    "CatalogueTab",
    "RelationsPanel",
    "LoginView",
    "LoginMode",
]
