"""Unit tests for API Pydantic schemas."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from hypercyber.api.schemas import (
    AccessRequest,
    Breach,
    BreachCreate,
    BreachStatus,
    BreachUpdate,
    CatalogueRelation,
    CatalogueRelationCreate,
    EncryptionAlgorithmCreate,
    EndpointCreate,
    Endpoint,
    EntityUpdate,
    LicenseKey,
    LicenseKeyCreate,
    LicenseType,
    RegisterEntryCreate,
    RequestStatus,
    SoftwareVersionCreate,
    User,
    decode,
)
from hypercyber.client.errors import ResponseError, ValidationError

NOW = "2025-01-15T10:00:00Z"


def _license_key(**fields) -> dict:
    return {"id": "k1", "name": "Office", "created_at": NOW, "updated_at": NOW, **fields}


class TestUser:
    """Tests for User schema."""

    @staticmethod
    def test_display_name_prefers_full_name() -> None:
        user = User(id="u1", email="alice@example.com", first_name="Alice", last_name="Martin")
        assert user.display_name == "Alice Martin"

    @staticmethod
    def test_display_name_falls_back_to_email() -> None:
        assert User(id="u1", email="alice@example.com").display_name == "alice@example.com"

    @staticmethod
    def test_unknown_backend_fields_ignored() -> None:
        user = User.model_validate({"id": "u1", "email": "a@b.c", "role": "admin"})
        assert not hasattr(user, "role")


class TestRequestModelBuild:
    """RequestModel.build converts pydantic errors into ValidationError."""

    @staticmethod
    def test_blank_required_fields_listed_sorted() -> None:
        with pytest.raises(ValidationError) as exc_info:
            RegisterEntryCreate.build(processing_name="  ", purpose="", legal_basis="contract")

        assert exc_info.value.fields == ["processing_name", "purpose"]

    @staticmethod
    def test_unknown_field_rejected() -> None:
        with pytest.raises(ValidationError) as exc_info:
            EndpointCreate.build(name="srv-01", colour="blue")

        assert exc_info.value.fields == ["colour"]

    @staticmethod
    def test_order_of_list_fields_preserved() -> None:
        payload = RegisterEntryCreate.build(
            processing_name="Payroll",
            purpose="Pay staff",
            legal_basis="contract",
            data_categories=["email", "name"],
        )
        assert payload.to_create_body()["data_categories"] == ["email", "name"]

    @staticmethod
    def test_create_body_omits_unset_optionals() -> None:
        body = EndpointCreate.build(name="srv-01").to_create_body()
        assert body == {"name": "srv-01", "endpoint_type": "machine"}

    @staticmethod
    def test_update_body_only_sends_given_fields() -> None:
        assert EntityUpdate.build(description="HQ").to_update_body() == {"description": "HQ"}

    @staticmethod
    def test_key_size_must_be_positive() -> None:
        with pytest.raises(ValidationError) as exc_info:
            EncryptionAlgorithmCreate.build(name="AES", key_size=0)
        assert exc_info.value.fields == ["key_size"]


class TestLicenseKey:
    """The license_type discriminator decides which storage half is populated."""

    @staticmethod
    def test_string_key() -> None:
        key = LicenseKey.model_validate(_license_key(license_type="string", key_value="ABC-123"))
        assert key.license_type == LicenseType.STRING
        assert not key.has_file

    @staticmethod
    def test_file_key_without_upload_yet() -> None:
        key = LicenseKey.model_validate(_license_key(license_type="file"))
        assert not key.has_file

    @staticmethod
    def test_string_key_with_file_rejected() -> None:
        with pytest.raises(PydanticValidationError):
            LicenseKey.model_validate(_license_key(license_type="string", key_value="A", file_name="k.lic"))

    @staticmethod
    def test_file_key_with_value_rejected() -> None:
        with pytest.raises(PydanticValidationError):
            LicenseKey.model_validate(_license_key(license_type="file", key_value="A", file_name="k.lic"))

    @staticmethod
    def test_create_string_requires_value() -> None:
        with pytest.raises(ValidationError):
            LicenseKeyCreate.build(name="Office", license_type="string")

    @staticmethod
    def test_create_file_forbids_value() -> None:
        with pytest.raises(ValidationError):
            LicenseKeyCreate.build(name="Office", license_type="file", key_value="ABC")

    @staticmethod
    def test_create_file_without_value() -> None:
        body = LicenseKeyCreate.build(name="Office", license_type="file").to_create_body()
        assert body == {"name": "Office", "license_type": "file"}


class TestRgpdRecords:
    @staticmethod
    def test_access_request_pending_by_default() -> None:
        request = AccessRequest.model_validate(
            {
                "id": "r1",
                "entity_id": "e1",
                "requester_name": "Bob",
                "requester_email": "bob@example.com",
                "request_type": "erasure",
                "created_at": NOW,
                "updated_at": NOW,
            }
        )
        assert request.status == RequestStatus.PENDING
        assert request.is_pending

    @staticmethod
    @pytest.mark.parametrize(
        ("status", "active"),
        [
            (BreachStatus.DETECTED, True),
            (BreachStatus.CONTAINED, True),
            (BreachStatus.INVESTIGATING, True),
            (BreachStatus.REPORTED, True),
            (BreachStatus.RESOLVED, False),
        ],
    )
    def test_breach_active_until_resolved(status: BreachStatus, active: bool) -> None:
        breach = Breach.model_validate(
            {
                "id": "b1",
                "entity_id": "e1",
                "breach_date": NOW,
                "discovery_date": NOW,
                "description": "Laptop stolen",
                "severity": "high",
                "status": status,
                "created_at": NOW,
                "updated_at": NOW,
            }
        )
        assert breach.is_active is active
        assert isinstance(breach.discovery_date, datetime)


class TestCatalogueRelation:
    @staticmethod
    def test_same_edge_ignores_id_and_timestamp() -> None:
        create = CatalogueRelationCreate.build(
            source_type="endpoint",
            source_id="e1",
            target_type="software_version",
            target_id="s1",
            relation_type="runs",
        )
        relation = CatalogueRelation.model_validate({**create.model_dump(), "id": "r9", "created_at": NOW})
        assert relation.same_edge(create)

    @staticmethod
    def test_direction_matters() -> None:
        forward = CatalogueRelation(
            id="r1",
            source_type="endpoint",
            source_id="e1",
            target_type="endpoint",
            target_id="e2",
            relation_type="uses",
            created_at=datetime(2025, 1, 1),
        )
        backward = forward.model_copy(update={"source_id": "e2", "target_id": "e1"})
        assert not forward.same_edge(backward)


class TestOutgoingTimestamps:
    @staticmethod
    def test_naive_breach_dates_sent_as_utc() -> None:
        body = BreachCreate.build(
            breach_date=datetime(2024, 3, 1, 10, 0),
            discovery_date="2024-03-02",
            description="Laptop stolen",
        ).to_create_body()

        assert body["breach_date"].startswith("2024-03-01T10:00:00")
        assert body["breach_date"].endswith(("Z", "+00:00"))
        assert body["discovery_date"].endswith(("Z", "+00:00"))

    @staticmethod
    def test_offset_converted_to_utc() -> None:
        paris = timezone(timedelta(hours=2))
        body = BreachUpdate.build(notification_date=datetime(2024, 3, 4, 12, 0, tzinfo=paris)).to_update_body()

        assert body["notification_date"].startswith("2024-03-04T10:00:00")
        assert body["notification_date"].endswith(("Z", "+00:00"))

    @staticmethod
    def test_catalogue_dates_carry_offset() -> None:
        software = SoftwareVersionCreate.build(
            name="nginx", version="1.25", release_date="2023-05-23", end_of_life="2025-05-23T00:00"
        ).to_create_body()
        license_key = LicenseKeyCreate.build(name="Office", key_value="K", expires_at="2026-01-01").to_create_body()

        for value in (software["release_date"], software["end_of_life"], license_key["expires_at"]):
            assert value.endswith(("Z", "+00:00"))


class TestDecode:
    @staticmethod
    def test_nested_metadata_is_a_response_error() -> None:
        body = {
            "id": "e1",
            "name": "web-01",
            "endpoint_type": "server",
            "metadata": {"os": {"name": "debian", "version": 12}},
            "created_at": NOW,
            "updated_at": NOW,
        }

        with pytest.raises(ResponseError) as exc_info:
            decode(Endpoint, body)

        assert any(f.startswith("metadata.os") for f in exc_info.value.fields)

    @staticmethod
    def test_unknown_status_is_a_response_error() -> None:
        body = {
            "id": "b1",
            "entity_id": "ent-1",
            "breach_date": NOW,
            "discovery_date": NOW,
            "description": "Laptop stolen",
            "severity": "high",
            "status": "closed",
            "created_at": NOW,
            "updated_at": NOW,
        }

        with pytest.raises(ResponseError) as exc_info:
            decode(Breach, body)

        assert exc_info.value.fields == ["status"]
        assert "Breach" in str(exc_info.value)
