"""Resource API modules, one per backend area."""

from hypercyber.api.auth import AuthAPI
from hypercyber.api.catalogue import CatalogueAPI, load_upload
from hypercyber.api.entities import EntitiesAPI
from hypercyber.api.rgpd import RGPDAPI

__all__ = ["AuthAPI", "EntitiesAPI", "RGPDAPI", "CatalogueAPI", "load_upload"]
