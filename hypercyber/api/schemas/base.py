"""Shared pydantic building blocks for API schemas."""

from datetime import UTC, datetime
from typing import Annotated, Any, Self, TypeVar

import pydantic
from pydantic import AfterValidator, BaseModel, ConfigDict, StringConstraints, TypeAdapter

from hypercyber.client.errors import ResponseError, ValidationError

T = TypeVar("T")

# Required text field: blank input counts as missing.
RequiredStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


# Outgoing timestamp: naive input is taken as UTC, always sent with an offset.
UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]

# Free-form per-kind metadata, restricted to scalar values.
MetadataValue = str | int | float | bool | None
Metadata = dict[str, MetadataValue]


class ApiModel(BaseModel):
    """Response model: tolerant of fields added by the backend."""

    model_config = ConfigDict(extra="ignore")


class RequestModel(BaseModel):
    """Request payload with presence validation."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    @classmethod
    def build(cls, **data: Any) -> Self:
        """Validate keyword arguments into a payload.

        Raises:
            ValidationError: Listing every rejected field.
        """
        try:
            return cls(**data)
        except pydantic.ValidationError as e:
            raise ValidationError(_error_fields(e, cls.__name__)) from e

    def to_create_body(self) -> dict[str, Any]:
        """JSON body for creation: unset optionals are omitted."""
        return self.model_dump(mode="json", exclude_none=True)

    def to_update_body(self) -> dict[str, Any]:
        """JSON body for partial updates: only explicitly set fields."""
        return self.model_dump(mode="json", exclude_unset=True)


def _error_fields(e: pydantic.ValidationError, default: str) -> list[str]:
    return sorted({".".join(str(p) for p in err["loc"]) or default for err in e.errors()})


def decode(schema: type[T] | TypeAdapter[T], data: Any) -> T:
    """Validate a response body against a model or a type adapter.

    Raises:
        ResponseError: If the body does not match the schema.
    """
    try:
        if isinstance(schema, TypeAdapter):
            return schema.validate_python(data)
        return schema.model_validate(data)
    except pydantic.ValidationError as e:
        raise ResponseError(e.title, _error_fields(e, e.title)) from e
