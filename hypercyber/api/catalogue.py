"""Catalogue endpoints (``/catalogue``): assets and typed relations."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter

from hypercyber.api.schemas import (
    CatalogueRelation,
    CatalogueRelationCreate,
    EncryptionAlgorithm,
    EncryptionAlgorithmCreate,
    Endpoint,
    EndpointCreate,
    EndpointUpdate,
    LicenseKey,
    LicenseKeyCreate,
    SoftwareVersion,
    SoftwareVersionCreate,
    decode,
)
from hypercyber.client.errors import ValidationError
from hypercyber.client.http import ApiClient, UploadFile

_ENDPOINT_LIST = TypeAdapter(list[Endpoint])
_LICENSE_KEY_LIST = TypeAdapter(list[LicenseKey])
_SOFTWARE_VERSION_LIST = TypeAdapter(list[SoftwareVersion])
_ALGORITHM_LIST = TypeAdapter(list[EncryptionAlgorithm])
_RELATION_LIST = TypeAdapter(list[CatalogueRelation])


def load_upload(path: Path) -> UploadFile:
    """Read a local file into a multipart upload tuple.

    Args:
        path: File to upload.

    Returns:
        (filename, content, content type) tuple.
    """
    content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return path.name, path.read_bytes(), content_type


class CatalogueAPI:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------

    async def list_endpoints(self, endpoint_type: str | None = None) -> list[Endpoint]:
        data = await self._client.get("/catalogue/endpoints", params={"endpoint_type": endpoint_type})
        return decode(_ENDPOINT_LIST, data)

    async def get_endpoint(self, endpoint_id: str) -> Endpoint:
        return decode(Endpoint, await self._client.get(f"/catalogue/endpoints/{endpoint_id}"))

    async def create_endpoint(self, **fields: Any) -> Endpoint:
        payload = EndpointCreate.build(**fields)
        data = await self._client.post("/catalogue/endpoints", json=payload.to_create_body())
        return decode(Endpoint, data)

    async def update_endpoint(self, endpoint_id: str, **changes: Any) -> Endpoint:
        payload = EndpointUpdate.build(**changes)
        data = await self._client.put(f"/catalogue/endpoints/{endpoint_id}", json=payload.to_update_body())
        return decode(Endpoint, data)

    # -------------------------------------------------------------------------
    # License keys
    # -------------------------------------------------------------------------

    async def list_license_keys(self) -> list[LicenseKey]:
        return decode(_LICENSE_KEY_LIST, await self._client.get("/catalogue/license-keys"))

    async def create_license_key(self, **fields: Any) -> LicenseKey:
        payload = LicenseKeyCreate.build(**fields)
        data = await self._client.post("/catalogue/license-keys", json=payload.to_create_body())
        return decode(LicenseKey, data)

    async def upload_license_key_file(self, license_key_id: str, file: UploadFile) -> LicenseKey | None:
        """Attach a key file to an existing ``file`` license key.

        Args:
            license_key_id: Id returned by create_license_key.
            file: (filename, content, content type) tuple.

        Returns:
            Updated license key when the backend echoes it, else None.
        """
        if not file[0]:
            raise ValidationError(["file"], "A file must be selected")
        data = await self._client.post(
            f"/catalogue/license-keys/{license_key_id}/upload",
            files={"file": file},
        )
        return decode(LicenseKey, data) if isinstance(data, dict) else None

    # -------------------------------------------------------------------------
    # Software versions
    # -------------------------------------------------------------------------

    async def list_software_versions(self) -> list[SoftwareVersion]:
        data = await self._client.get("/catalogue/software-versions")
        return decode(_SOFTWARE_VERSION_LIST, data)

    async def create_software_version(self, **fields: Any) -> SoftwareVersion:
        payload = SoftwareVersionCreate.build(**fields)
        data = await self._client.post("/catalogue/software-versions", json=payload.to_create_body())
        return decode(SoftwareVersion, data)

    # -------------------------------------------------------------------------
    # Encryption algorithms
    # -------------------------------------------------------------------------

    async def list_encryption_algorithms(self) -> list[EncryptionAlgorithm]:
        data = await self._client.get("/catalogue/encryption-algorithms")
        return decode(_ALGORITHM_LIST, data)

    async def create_encryption_algorithm(self, **fields: Any) -> EncryptionAlgorithm:
        payload = EncryptionAlgorithmCreate.build(**fields)
        data = await self._client.post("/catalogue/encryption-algorithms", json=payload.to_create_body())
        return decode(EncryptionAlgorithm, data)

    # -------------------------------------------------------------------------
    # Relations
    # -------------------------------------------------------------------------

    async def create_relation(
        self,
        source_type: str,
        source_id: str,
        target_type: str,
        target_id: str,
        relation_type: str,
        description: str | None = None,
    ) -> CatalogueRelation:
        """Create a directed relation between two addressable resources.

        Identical endpoints with a different (or even the same) type are
        accepted; nothing is deduplicated client-side.

        Raises:
            ValidationError: If any identifying field or relation_type is blank.
        """
        payload = CatalogueRelationCreate.build(
            source_type=source_type,
            source_id=source_id,
            target_type=target_type,
            target_id=target_id,
            relation_type=relation_type,
            description=description or None,
        )
        data = await self._client.post("/catalogue/relations", json=payload.to_create_body())
        return decode(CatalogueRelation, data)

    async def list_relations(self, source_id: str, source_type: str) -> list[CatalogueRelation]:
        """Outgoing edges of one source, in backend order."""
        if not source_id or not source_type:
            raise ValidationError(
                [name for name, v in (("source_id", source_id), ("source_type", source_type)) if not v]
            )
        data = await self._client.get(
            "/catalogue/relations",
            params={"source_id": source_id, "source_type": source_type},
        )
        return decode(_RELATION_LIST, data)

    async def delete_relation(self, relation_id: str) -> None:
        await self._client.delete(f"/catalogue/relations/{relation_id}")
