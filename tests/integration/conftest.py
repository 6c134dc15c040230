"""Shared fixtures for integration tests.

Every test here drives a real ``Console`` against the in-memory backend
from the root conftest.
"""

from __future__ import annotations

from typing import Any

import pytest

# ---------------------------------------------------------------------------
# Auto-mark all tests in this directory as "integration"
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Auto-apply ``@pytest.mark.integration`` to every test collected here."""
    integration_marker = pytest.mark.integration
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(integration_marker)


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------


@pytest.fixture
def acme(backend) -> dict[str, Any]:
    """Entity ``Acme`` stored in the backend."""
    return backend.add_entity("Acme", "Head office")


@pytest.fixture
def globex(backend) -> dict[str, Any]:
    return backend.add_entity("Globex")
