"""Catalogue page: one tab per asset kind plus a relations panel."""

from dataclasses import dataclass
from enum import StrEnum

from hypercyber.api import CatalogueAPI
from hypercyber.api.schemas import (
    CatalogueRelation,
    EncryptionAlgorithm,
    Endpoint,
    LicenseKey,
    LicenseType,
    Metadata,
    SoftwareVersion,
)
from hypercyber.cache import QueryCache
from hypercyber.client.http import UploadFile
from hypercyber.views.base import (
    CATALOGUE_ENCRYPTION_ALGORITHMS,
    CATALOGUE_ENDPOINTS,
    CATALOGUE_LICENSE_KEYS,
    CATALOGUE_RELATIONS,
    CATALOGUE_SOFTWARE_VERSIONS,
    ListView,
    format_date,
)


class CatalogueTab(StrEnum):
    ENDPOINTS = "endpoints"
    LICENSE_KEYS = "license-keys"
    SOFTWARE_VERSIONS = "software-versions"
    ENCRYPTION_ALGORITHMS = "encryption-algorithms"


# =============================================================================
# ENDPOINTS
# =============================================================================


@dataclass
class EndpointForm:
    name: str = ""
    endpoint_type: str = "machine"
    description: str = ""
    address: str = ""
    metadata: Metadata | None = None


class EndpointsTab(ListView[Endpoint]):
    title = "Endpoints"
    kind = CATALOGUE_ENDPOINTS
    headers = ("Name", "Type", "Address", "Description")
    empty_message = "No endpoints found."

    def __init__(self, cache: QueryCache, catalogue_api: CatalogueAPI) -> None:
        super().__init__(cache)
        self._api = catalogue_api
        self.form = EndpointForm()
        self.endpoint_type: str | None = None

    def filters(self) -> dict[str, str | None]:
        return {"endpoint_type": self.endpoint_type}

    async def _load_items(self) -> list[Endpoint]:
        return await self._api.list_endpoints(self.endpoint_type)

    def reset_form(self) -> None:
        self.form = EndpointForm()

    async def submit(self) -> Endpoint | None:
        form = self.form
        return await self._mutate(
            lambda: self._api.create_endpoint(
                name=form.name,
                endpoint_type=form.endpoint_type,
                description=form.description or None,
                address=form.address or None,
                metadata=form.metadata,
            ),
            "create",
        )

    async def update(self, endpoint_id: str, **changes: object) -> Endpoint | None:
        return await self._mutate(lambda: self._api.update_endpoint(endpoint_id, **changes), "update")

    def row(self, item: Endpoint) -> tuple[str, ...]:
        return (item.name, item.endpoint_type, item.address or "", item.description or "")


# =============================================================================
# LICENSE KEYS
# =============================================================================


@dataclass
class LicenseKeyForm:
    name: str = ""
    license_type: LicenseType = LicenseType.STRING
    key_value: str = ""
    description: str = ""
    file: UploadFile | None = None


@dataclass(frozen=True)
class LicenseKeyOutcome:
    """Result of the two-step creation flow.

    Attributes:
        license_key: Created metadata record (kept even if the upload failed).
        uploaded: Whether the key file was accepted.
        upload_error: Message of the failed upload, if any.
    """

    license_key: LicenseKey
    uploaded: bool = False
    upload_error: str | None = None


class LicenseKeysTab(ListView[LicenseKey]):
    title = "License keys"
    kind = CATALOGUE_LICENSE_KEYS
    headers = ("Name", "Type", "Key / file", "Expires")
    empty_message = "No license keys found."

    def __init__(self, cache: QueryCache, catalogue_api: CatalogueAPI) -> None:
        super().__init__(cache)
        self._api = catalogue_api
        self.form = LicenseKeyForm()
        self.pending_upload: LicenseKey | None = None

    async def _load_items(self) -> list[LicenseKey]:
        return await self._api.list_license_keys()

    def reset_form(self) -> None:
        self.form = LicenseKeyForm()

    async def submit(self) -> LicenseKeyOutcome | None:
        """Create the metadata record, then upload the file for ``file`` keys.

        There is no transaction: when the upload fails the record stays,
        the error is surfaced in ``self.error`` and the form is kept open.
        Submitting it again retries the upload against that same record
        instead of creating another one.
        """
        form = self.form
        if self.pending_upload is not None and form.file is not None:
            return await self.upload(self.pending_upload, form.file, keep_form=form)

        license_key = await self._mutate(
            lambda: self._api.create_license_key(
                name=form.name,
                license_type=form.license_type,
                key_value=(form.key_value or None) if form.license_type == LicenseType.STRING else None,
                description=form.description or None,
            ),
            "create",
        )
        if license_key is None:
            return None
        if form.license_type != LicenseType.FILE or form.file is None:
            return LicenseKeyOutcome(license_key=license_key)
        return await self.upload(license_key, form.file, keep_form=form)

    async def upload(
        self,
        license_key: LicenseKey,
        file: UploadFile,
        keep_form: LicenseKeyForm | None = None,
    ) -> LicenseKeyOutcome:
        updated = await self._run(self._api.upload_license_key_file(license_key.id, file), "upload")
        self._cache.invalidate(self.kind)
        if self.error is not None:
            if keep_form is not None:
                self.form = keep_form
                self.show_create_form = True
                self.pending_upload = license_key
            return LicenseKeyOutcome(license_key=license_key, upload_error=self.error)
        if self.pending_upload is not None and self.pending_upload.id == license_key.id:
            self.pending_upload = None
            self.show_create_form = False
            self.reset_form()
        return LicenseKeyOutcome(license_key=updated or license_key, uploaded=True)

    def row(self, item: LicenseKey) -> tuple[str, ...]:
        if item.license_type == LicenseType.STRING:
            stored = item.key_value or ""
        else:
            stored = item.file_name or "(no file uploaded)"
        return (item.name, item.license_type, stored, format_date(item.expires_at))


# =============================================================================
# SOFTWARE VERSIONS
# =============================================================================


@dataclass
class SoftwareVersionForm:
    name: str = ""
    version: str = ""
    description: str = ""
    metadata: Metadata | None = None


class SoftwareVersionsTab(ListView[SoftwareVersion]):
    title = "Software versions"
    kind = CATALOGUE_SOFTWARE_VERSIONS
    headers = ("Name", "Version", "Released", "End of life")
    empty_message = "No software versions found."

    def __init__(self, cache: QueryCache, catalogue_api: CatalogueAPI) -> None:
        super().__init__(cache)
        self._api = catalogue_api
        self.form = SoftwareVersionForm()

    async def _load_items(self) -> list[SoftwareVersion]:
        return await self._api.list_software_versions()

    def reset_form(self) -> None:
        self.form = SoftwareVersionForm()

    async def submit(self) -> SoftwareVersion | None:
        form = self.form
        return await self._mutate(
            lambda: self._api.create_software_version(
                name=form.name,
                version=form.version,
                description=form.description or None,
                metadata=form.metadata,
            ),
            "create",
        )

    def row(self, item: SoftwareVersion) -> tuple[str, ...]:
        return (item.name, item.version, format_date(item.release_date), format_date(item.end_of_life))


# =============================================================================
# ENCRYPTION ALGORITHMS
# =============================================================================


@dataclass
class EncryptionAlgorithmForm:
    name: str = ""
    algorithm_type: str = "symmetric"
    key_size: str = ""
    standard: str = ""
    description: str = ""


class EncryptionAlgorithmsTab(ListView[EncryptionAlgorithm]):
    title = "Encryption algorithms"
    kind = CATALOGUE_ENCRYPTION_ALGORITHMS
    headers = ("Name", "Type", "Key size", "Standard")
    empty_message = "No encryption algorithms found."

    def __init__(self, cache: QueryCache, catalogue_api: CatalogueAPI) -> None:
        super().__init__(cache)
        self._api = catalogue_api
        self.form = EncryptionAlgorithmForm()

    async def _load_items(self) -> list[EncryptionAlgorithm]:
        return await self._api.list_encryption_algorithms()

    def reset_form(self) -> None:
        self.form = EncryptionAlgorithmForm()

    async def submit(self) -> EncryptionAlgorithm | None:
        form = self.form
        return await self._mutate(
            lambda: self._api.create_encryption_algorithm(
                name=form.name,
                algorithm_type=form.algorithm_type,
                key_size=form.key_size.strip() or None,
                standard=form.standard or None,
                description=form.description or None,
            ),
            "create",
        )

    def row(self, item: EncryptionAlgorithm) -> tuple[str, ...]:
        key_size = f"{item.key_size} bits" if item.key_size else ""
        return (item.name, item.algorithm_type, key_size, item.standard or "")


# =============================================================================
# RELATIONS
# =============================================================================


@dataclass
class RelationForm:
    target_type: str = ""
    target_id: str = ""
    relation_type: str = "uses"
    description: str = ""


class RelationsPanel(ListView[CatalogueRelation]):
    """Outgoing relations of one catalogue item.

    The list is never patched locally: after a create or delete the
    relations key of this source is invalidated and re-requested.
    """

    title = "Relations"
    kind = CATALOGUE_RELATIONS
    headers = ("Id", "Relation", "Target type", "Target id", "Description")
    empty_message = "No relations."

    def __init__(self, cache: QueryCache, catalogue_api: CatalogueAPI, source_type: str, source_id: str) -> None:
        super().__init__(cache)
        self._api = catalogue_api
        self.source_type = source_type
        self.source_id = source_id
        self.form = RelationForm()

    def filters(self) -> dict[str, str | None]:
        return {"source_type": self.source_type, "source_id": self.source_id}

    async def _load_items(self) -> list[CatalogueRelation]:
        return await self._api.list_relations(source_id=self.source_id, source_type=self.source_type)

    def reset_form(self) -> None:
        self.form = RelationForm()

    async def submit(self) -> CatalogueRelation | None:
        form = self.form
        relation = await self._mutate(
            lambda: self._api.create_relation(
                source_type=self.source_type,
                source_id=self.source_id,
                target_type=form.target_type,
                target_id=form.target_id,
                relation_type=form.relation_type,
                description=form.description or None,
            ),
            "create",
        )
        if relation is not None:
            await self.load(force=True)
        return relation

    async def delete(self, relation_id: str) -> bool:
        await self._mutate(lambda: self._api.delete_relation(relation_id), "delete")
        if self.error is not None:
            return False
        await self.load(force=True)
        return True

    def row(self, item: CatalogueRelation) -> tuple[str, ...]:
        return (item.id, item.relation_type, item.target_type, item.target_id, item.description or "")


# =============================================================================
# PAGE
# =============================================================================


class CatalogueView:
    """Tabbed catalogue page."""

    def __init__(self, cache: QueryCache, catalogue_api: CatalogueAPI) -> None:
        self._cache = cache
        self._api = catalogue_api
        self.active_tab = CatalogueTab.ENDPOINTS
        self.tabs: dict[CatalogueTab, ListView] = {
            CatalogueTab.ENDPOINTS: EndpointsTab(cache, catalogue_api),
            CatalogueTab.LICENSE_KEYS: LicenseKeysTab(cache, catalogue_api),
            CatalogueTab.SOFTWARE_VERSIONS: SoftwareVersionsTab(cache, catalogue_api),
            CatalogueTab.ENCRYPTION_ALGORITHMS: EncryptionAlgorithmsTab(cache, catalogue_api),
        }

    @property
    def endpoints(self) -> EndpointsTab:
        return self.tabs[CatalogueTab.ENDPOINTS]  # type: ignore[return-value]

    @property
    def license_keys(self) -> LicenseKeysTab:
        return self.tabs[CatalogueTab.LICENSE_KEYS]  # type: ignore[return-value]

    @property
    def software_versions(self) -> SoftwareVersionsTab:
        return self.tabs[CatalogueTab.SOFTWARE_VERSIONS]  # type: ignore[return-value]

    @property
    def encryption_algorithms(self) -> EncryptionAlgorithmsTab:
        return self.tabs[CatalogueTab.ENCRYPTION_ALGORITHMS]  # type: ignore[return-value]

    @property
    def current(self) -> ListView:
        return self.tabs[self.active_tab]

    def select_tab(self, tab: CatalogueTab | str) -> ListView:
        self.active_tab = CatalogueTab(tab)
        return self.current

    def relations(self, source_type: str, source_id: str) -> RelationsPanel:
        return RelationsPanel(self._cache, self._api, source_type, source_id)

    async def load(self, force: bool = False) -> list:
        return await self.current.load(force=force)

    def render(self) -> str:
        tabs = "  ".join(f"[{t}]" if t == self.active_tab else t for t in CatalogueTab)
        return f"Catalogue\n{tabs}\n\n{self.current.render()}"
