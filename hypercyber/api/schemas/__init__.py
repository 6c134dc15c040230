"""Pydantic schemas for API requests and responses."""

from hypercyber.api.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RefreshResponse,
    RegisterRequest,
    User,
)
from hypercyber.api.schemas.base import ApiModel, Metadata, RequestModel, decode
from hypercyber.api.schemas.catalogue import (
    CatalogueRelation,
    CatalogueRelationCreate,
    EncryptionAlgorithm,
    EncryptionAlgorithmCreate,
    Endpoint,
    EndpointCreate,
    EndpointUpdate,
    LicenseKey,
    LicenseKeyCreate,
    LicenseType,
    SoftwareVersion,
    SoftwareVersionCreate,
)
from hypercyber.api.schemas.entities import Entity, EntityCreate, EntityUpdate, EntityUser
from hypercyber.api.schemas.rgpd import (
    AccessRequest,
    AccessRequestAnswer,
    AccessRequestCreate,
    Breach,
    BreachCreate,
    BreachStatus,
    BreachUpdate,
    RegisterEntry,
    RegisterEntryCreate,
    RegisterEntryUpdate,
    RequestStatus,
    RequestType,
    Severity,
)

__all__ = [
    # Base
    "ApiModel",
    "RequestModel",
    "Metadata",
    "decode",
    # Auth
    "User",
    "LoginRequest",
    "RegisterRequest",
    "AuthResponse",
    "RefreshResponse",
    # Entities
    "Entity",
    "EntityCreate",
    "EntityUpdate",
    "EntityUser",
    # RGPD
    "RequestType",
    "RequestStatus",
    "Severity",
    "BreachStatus",
    "RegisterEntry",
    "RegisterEntryCreate",
    "RegisterEntryUpdate",
    "AccessRequest",
    "AccessRequestCreate",
    "AccessRequestAnswer",
    "Breach",
    "BreachCreate",
    "BreachUpdate",
    # Catalogue
    "LicenseType",
    "Endpoint",
    "EndpointCreate",
    "EndpointUpdate",
    "LicenseKey",
    "LicenseKeyCreate",
    "SoftwareVersion",
    "SoftwareVersionCreate",
    "EncryptionAlgorithm",
    "EncryptionAlgorithmCreate",
    "CatalogueRelation",
    "CatalogueRelationCreate",
]
