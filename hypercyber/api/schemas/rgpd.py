"""RGPD record schemas: register entries, access requests, breaches."""

from datetime import datetime
from enum import StrEnum

from pydantic import Field

from hypercyber.api.schemas.base import ApiModel, RequestModel, RequiredStr, UtcDatetime

# =============================================================================
# ENUMERATIONS
# =============================================================================


class RequestType(StrEnum):
    """Data-subject right being exercised."""

    ACCESS = "access"
    RECTIFICATION = "rectification"
    ERASURE = "erasure"
    PORTABILITY = "portability"
    OBJECTION = "objection"


class RequestStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    REJECTED = "rejected"


class Severity(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class BreachStatus(StrEnum):
    DETECTED = "detected"
    CONTAINED = "contained"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"
    REPORTED = "reported"


# =============================================================================
# REGISTER
# =============================================================================


class RegisterEntry(ApiModel):
    """Documented processing activity (GDPR article 30)."""

    id: str
    entity_id: str
    processing_name: str
    purpose: str
    legal_basis: str
    data_categories: list[str] = Field(default_factory=list)
    data_subjects: list[str] = Field(default_factory=list)
    recipients: list[str] = Field(default_factory=list)
    retention_period: str | None = None
    security_measures: str | None = None
    created_at: datetime
    updated_at: datetime


class RegisterEntryCreate(RequestModel):
    processing_name: RequiredStr
    purpose: RequiredStr
    legal_basis: RequiredStr
    data_categories: list[str] = Field(default_factory=list)
    data_subjects: list[str] = Field(default_factory=list)
    recipients: list[str] = Field(default_factory=list)
    retention_period: str | None = None
    security_measures: str | None = None


class RegisterEntryUpdate(RequestModel):
    processing_name: RequiredStr | None = None
    purpose: RequiredStr | None = None
    legal_basis: RequiredStr | None = None
    data_categories: list[str] | None = None
    data_subjects: list[str] | None = None
    recipients: list[str] | None = None
    retention_period: str | None = None
    security_measures: str | None = None


# =============================================================================
# ACCESS REQUESTS
# =============================================================================


class AccessRequest(ApiModel):
    """Data-subject request against one entity."""

    id: str
    entity_id: str
    requester_name: str
    requester_email: str
    request_type: RequestType
    description: str | None = None
    status: RequestStatus = RequestStatus.PENDING
    response: str | None = None
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING


class AccessRequestCreate(RequestModel):
    requester_name: RequiredStr
    requester_email: RequiredStr
    request_type: RequestType = RequestType.ACCESS
    description: str | None = None


class AccessRequestAnswer(RequestModel):
    """Body of ``POST /rgpd/access-requests/{id}/respond``."""

    status: RequestStatus
    response: str | None = None


# =============================================================================
# BREACHES
# =============================================================================


class Breach(ApiModel):
    """Declared personal-data security incident."""

    id: str
    entity_id: str
    breach_date: datetime
    discovery_date: datetime
    description: str
    data_categories_affected: list[str] = Field(default_factory=list)
    number_of_subjects: int | None = Field(default=None, ge=0)
    severity: Severity
    status: BreachStatus = BreachStatus.DETECTED
    containment_measures: str | None = None
    notification_date: datetime | None = None
    authority_notified: bool = False
    subjects_notified: bool = False
    created_at: datetime
    updated_at: datetime

    @property
    def is_active(self) -> bool:
        return self.status != BreachStatus.RESOLVED


class BreachCreate(RequestModel):
    breach_date: UtcDatetime
    discovery_date: UtcDatetime
    description: RequiredStr
    data_categories_affected: list[str] = Field(default_factory=list)
    number_of_subjects: int | None = Field(default=None, ge=0)
    severity: Severity = Severity.MEDIUM
    containment_measures: str | None = None


class BreachUpdate(RequestModel):
    description: RequiredStr | None = None
    data_categories_affected: list[str] | None = None
    number_of_subjects: int | None = Field(default=None, ge=0)
    severity: Severity | None = None
    status: BreachStatus | None = None
    containment_measures: str | None = None
    notification_date: UtcDatetime | None = None
    authority_notified: bool | None = None
    subjects_notified: bool | None = None
