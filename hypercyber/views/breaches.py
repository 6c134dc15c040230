"""Breach declarations page."""

from dataclasses import dataclass, field
from datetime import datetime

from hypercyber.api import RGPDAPI, EntitiesAPI
from hypercyber.api.schemas import Breach, BreachStatus, Severity
from hypercyber.cache import QueryCache
from hypercyber.client.errors import ValidationError
from hypercyber.views.base import RGPD_BREACHES, EntityScopedView, format_date, split_list


@dataclass
class BreachForm:
    """Creation form.

    Dates are ISO-8601 strings and the subject count is free text, as typed
    by the user; ``to_payload`` converts them.
    """

    breach_date: str = ""
    discovery_date: str = field(default_factory=lambda: datetime.now().date().isoformat())
    description: str = ""
    data_categories_affected: str = ""
    number_of_subjects: str = ""
    severity: Severity = Severity.MEDIUM
    containment_measures: str = ""

    def to_payload(self) -> dict[str, object]:
        return {
            "breach_date": _parse_date("breach_date", self.breach_date),
            "discovery_date": _parse_date("discovery_date", self.discovery_date),
            "description": self.description,
            "data_categories_affected": split_list(self.data_categories_affected),
            "number_of_subjects": _parse_count(self.number_of_subjects),
            "severity": self.severity,
            "containment_measures": self.containment_measures or None,
        }


def _parse_date(name: str, value: str) -> datetime:
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError as e:
        raise ValidationError([name], f"{name} must be an ISO date") from e


def _parse_count(value: str) -> int | None:
    if not value.strip():
        return None
    try:
        count = int(value)
    except ValueError as e:
        raise ValidationError(["number_of_subjects"], "number_of_subjects must be an integer") from e
    if count < 0:
        raise ValidationError(["number_of_subjects"], "number_of_subjects cannot be negative")
    return count


class BreachesView(EntityScopedView[Breach]):
    title = "RGPD breaches"
    kind = RGPD_BREACHES
    headers = ("Id", "Discovered", "Description", "Severity", "Status", "Authority notified")
    empty_message = "No breaches found."

    def __init__(self, cache: QueryCache, entities_api: EntitiesAPI, rgpd_api: RGPDAPI) -> None:
        super().__init__(cache, entities_api)
        self._api = rgpd_api
        self.form = BreachForm()

    async def _load_items(self) -> list[Breach]:
        return await self._api.list_breaches(self.selected_entity)

    def reset_form(self) -> None:
        self.form = BreachForm()

    def active(self) -> list[Breach]:
        return [b for b in self.items if b.is_active]

    async def submit(self) -> Breach | None:
        entity_id = self.selected_entity or ""
        form = self.form

        async def create() -> Breach:
            return await self._api.create_breach(entity_id, **form.to_payload())

        return await self._mutate(create, "create")

    async def update_status(self, breach_id: str, status: BreachStatus | str) -> Breach | None:
        return await self._mutate(lambda: self._api.update_breach(breach_id, status=status), "update_status")

    async def mark_notified(
        self,
        breach_id: str,
        authority: bool | None = None,
        subjects: bool | None = None,
        notification_date: datetime | None = None,
    ) -> Breach | None:
        """Record notification of the supervisory authority and/or subjects."""
        changes: dict[str, object] = {}
        if authority is not None:
            changes["authority_notified"] = authority
        if subjects is not None:
            changes["subjects_notified"] = subjects
        if notification_date is not None:
            changes["notification_date"] = notification_date
        return await self._mutate(lambda: self._api.update_breach(breach_id, **changes), "mark_notified")

    def row(self, item: Breach) -> tuple[str, ...]:
        return (
            item.id,
            format_date(item.discovery_date),
            item.description,
            item.severity,
            item.status,
            "yes" if item.authority_notified else "no",
        )
