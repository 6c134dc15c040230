"""Processing register page."""

from dataclasses import dataclass

from hypercyber.api import RGPDAPI, EntitiesAPI
from hypercyber.api.schemas import RegisterEntry
from hypercyber.cache import QueryCache
from hypercyber.views.base import RGPD_REGISTER, EntityScopedView, format_date, split_list


@dataclass
class RegisterForm:
    """Creation form; list fields are comma-separated inputs."""

    processing_name: str = ""
    purpose: str = ""
    legal_basis: str = ""
    data_categories: str = ""
    data_subjects: str = ""
    recipients: str = ""
    retention_period: str = ""
    security_measures: str = ""

    def to_payload(self) -> dict[str, object]:
        return {
            "processing_name": self.processing_name,
            "purpose": self.purpose,
            "legal_basis": self.legal_basis,
            "data_categories": split_list(self.data_categories),
            "data_subjects": split_list(self.data_subjects),
            "recipients": split_list(self.recipients),
            "retention_period": self.retention_period or None,
            "security_measures": self.security_measures or None,
        }


class RegisterView(EntityScopedView[RegisterEntry]):
    title = "RGPD register"
    kind = RGPD_REGISTER
    headers = ("Processing", "Purpose", "Legal basis", "Data categories", "Created")
    empty_message = "No register entries found."

    def __init__(self, cache: QueryCache, entities_api: EntitiesAPI, rgpd_api: RGPDAPI) -> None:
        super().__init__(cache, entities_api)
        self._api = rgpd_api
        self.form = RegisterForm()

    async def _load_items(self) -> list[RegisterEntry]:
        return await self._api.get_register(self.selected_entity)

    def reset_form(self) -> None:
        self.form = RegisterForm()

    async def submit(self) -> RegisterEntry | None:
        """Add an entry under the selected entity."""
        entity_id = self.selected_entity or ""
        payload = self.form.to_payload()
        return await self._mutate(lambda: self._api.add_to_register(entity_id, **payload), "create")

    async def update(self, entry_id: str, **changes: object) -> RegisterEntry | None:
        return await self._mutate(lambda: self._api.update_register_entry(entry_id, **changes), "update")

    def row(self, item: RegisterEntry) -> tuple[str, ...]:
        return (
            item.processing_name,
            item.purpose,
            item.legal_basis,
            ", ".join(item.data_categories),
            format_date(item.created_at),
        )
