"""Catalogue asset and relation schemas."""

from datetime import datetime
from enum import StrEnum
from typing import Self

from pydantic import Field, model_validator

from hypercyber.api.schemas.base import ApiModel, Metadata, RequestModel, RequiredStr, UtcDatetime


class LicenseType(StrEnum):
    """Storage discriminator of a license key."""

    STRING = "string"
    FILE = "file"


# =============================================================================
# ENDPOINTS
# =============================================================================


class Endpoint(ApiModel):
    """Machine, program, URL or API tracked in the catalogue."""

    id: str
    name: str
    endpoint_type: str
    description: str | None = None
    address: str | None = None
    metadata: Metadata | None = None
    created_at: datetime
    updated_at: datetime


class EndpointCreate(RequestModel):
    name: RequiredStr
    endpoint_type: RequiredStr = "machine"
    description: str | None = None
    address: str | None = None
    metadata: Metadata | None = None


class EndpointUpdate(RequestModel):
    name: RequiredStr | None = None
    endpoint_type: RequiredStr | None = None
    description: str | None = None
    address: str | None = None
    metadata: Metadata | None = None


# =============================================================================
# LICENSE KEYS
# =============================================================================


class LicenseKey(ApiModel):
    """License key stored either inline or as an uploaded file.

    The ``license_type`` discriminator decides which half is populated:
    ``key_value`` for string keys, the file descriptor for file keys.
    """

    id: str
    name: str
    license_type: LicenseType
    key_value: str | None = None
    file_path: str | None = None
    file_name: str | None = None
    file_size: int | None = Field(default=None, ge=0)
    storage_type: str = "local"
    description: str | None = None
    expires_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="after")
    def check_storage_exclusive(self) -> Self:
        has_file = any(v is not None for v in (self.file_path, self.file_name, self.file_size))
        if self.license_type == LicenseType.STRING and has_file:
            raise ValueError("string license key cannot carry a stored file")
        if self.license_type == LicenseType.FILE and self.key_value is not None:
            raise ValueError("file license key cannot carry an inline key_value")
        return self

    @property
    def has_file(self) -> bool:
        return self.file_name is not None


class LicenseKeyCreate(RequestModel):
    name: RequiredStr
    license_type: LicenseType = LicenseType.STRING
    key_value: str | None = None
    description: str | None = None
    expires_at: UtcDatetime | None = None

    @model_validator(mode="after")
    def check_key_value(self) -> Self:
        if self.license_type == LicenseType.STRING and not self.key_value:
            raise ValueError("key_value is required for string license keys")
        if self.license_type == LicenseType.FILE and self.key_value:
            raise ValueError("key_value must be empty for file license keys")
        return self


# =============================================================================
# SOFTWARE VERSIONS
# =============================================================================


class SoftwareVersion(ApiModel):
    id: str
    name: str
    version: str
    description: str | None = None
    release_date: datetime | None = None
    end_of_life: datetime | None = None
    metadata: Metadata | None = None
    created_at: datetime
    updated_at: datetime


class SoftwareVersionCreate(RequestModel):
    name: RequiredStr
    version: RequiredStr
    description: str | None = None
    release_date: UtcDatetime | None = None
    end_of_life: UtcDatetime | None = None
    metadata: Metadata | None = None


# =============================================================================
# ENCRYPTION ALGORITHMS
# =============================================================================


class EncryptionAlgorithm(ApiModel):
    id: str
    name: str
    algorithm_type: str
    key_size: int | None = None
    description: str | None = None
    standard: str | None = None
    metadata: Metadata | None = None
    created_at: datetime
    updated_at: datetime


class EncryptionAlgorithmCreate(RequestModel):
    name: RequiredStr
    algorithm_type: RequiredStr = "symmetric"
    key_size: int | None = Field(default=None, gt=0)
    description: str | None = None
    standard: str | None = None
    metadata: Metadata | None = None


# =============================================================================
# RELATIONS
# =============================================================================


class CatalogueRelation(ApiModel):
    """Directed, typed edge ``(source_type, source_id) -> (target_type, target_id)``."""

    id: str
    source_type: str
    source_id: str
    target_type: str
    target_id: str
    relation_type: str
    description: str | None = None
    created_at: datetime

    def same_edge(self, other: "CatalogueRelation | CatalogueRelationCreate") -> bool:
        """Compare every field except backend-assigned id and timestamp."""
        return (
            self.source_type == other.source_type
            and self.source_id == other.source_id
            and self.target_type == other.target_type
            and self.target_id == other.target_id
            and self.relation_type == other.relation_type
            and self.description == other.description
        )


class CatalogueRelationCreate(RequestModel):
    source_type: RequiredStr
    source_id: RequiredStr
    target_type: RequiredStr
    target_id: RequiredStr
    relation_type: RequiredStr
    description: str | None = None
