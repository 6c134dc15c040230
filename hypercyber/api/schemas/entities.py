"""Organizational entity schemas."""

from datetime import datetime

from hypercyber.api.schemas.base import ApiModel, RequestModel, RequiredStr


class Entity(ApiModel):
    """Organizational unit owning RGPD records."""

    id: str
    name: str
    description: str | None = None
    created_at: datetime
    updated_at: datetime


class EntityCreate(RequestModel):
    name: RequiredStr
    description: str | None = None


class EntityUpdate(RequestModel):
    name: RequiredStr | None = None
    description: str | None = None


class EntityUser(ApiModel):
    """Membership of a user in an entity."""

    id: str
    user_id: str
    entity_id: str
    role: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
