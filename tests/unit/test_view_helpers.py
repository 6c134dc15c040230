"""Unit tests for view formatting helpers and form conversion."""

from __future__ import annotations

from datetime import datetime

import pytest

from hypercyber.api.schemas import Severity
from hypercyber.client.errors import ValidationError
from hypercyber.views import render_table, split_list
from hypercyber.views.base import format_date
from hypercyber.views.breaches import BreachForm
from hypercyber.views.register import RegisterForm


class TestSplitList:
    @staticmethod
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("email, name", ["email", "name"]),
            ("name,email", ["name", "email"]),
            (" email ,, name , ", ["email", "name"]),
            ("", []),
            (None, []),
        ],
    )
    def test_split(text, expected):
        assert split_list(text) == expected


class TestRenderTable:
    @staticmethod
    def test_columns_aligned():
        table = render_table(("Name", "Type"), [("srv-01", "machine"), ("api", "api")])
        lines = table.splitlines()

        assert lines[0] == "Name   | Type"
        assert lines[1] == "-------+--------"
        assert lines[2] == "srv-01 | machine"
        assert lines[3] == "api    | api"

    @staticmethod
    def test_format_date():
        assert format_date(datetime(2025, 3, 7)) == "07/03/2025"
        assert format_date(None) == ""


class TestForms:
    @staticmethod
    def test_register_form_payload():
        form = RegisterForm(
            processing_name="Payroll",
            purpose="Pay staff",
            legal_basis="contract",
            data_categories="email, name",
        )
        payload = form.to_payload()

        assert payload["data_categories"] == ["email", "name"]
        assert payload["recipients"] == []
        assert payload["retention_period"] is None

    @staticmethod
    def test_breach_form_payload():
        form = BreachForm(
            breach_date="2025-02-01",
            discovery_date="2025-02-03",
            description="Laptop stolen",
            number_of_subjects="120",
            severity=Severity.HIGH,
        )
        payload = form.to_payload()

        assert payload["breach_date"] == datetime(2025, 2, 1)
        assert payload["number_of_subjects"] == 120
        assert payload["severity"] == Severity.HIGH

    @staticmethod
    def test_breach_form_defaults_discovery_to_today():
        assert BreachForm().discovery_date == datetime.now().date().isoformat()

    @staticmethod
    @pytest.mark.parametrize(
        ("fields", "bad"),
        [
            ({"breach_date": "yesterday"}, "breach_date"),
            ({"breach_date": "2025-02-01", "number_of_subjects": "many"}, "number_of_subjects"),
            ({"breach_date": "2025-02-01", "number_of_subjects": "-3"}, "number_of_subjects"),
        ],
    )
    def test_breach_form_rejects_bad_input(fields, bad):
        with pytest.raises(ValidationError) as exc_info:
            BreachForm(description="x", **fields).to_payload()
        assert exc_info.value.fields == [bad]
