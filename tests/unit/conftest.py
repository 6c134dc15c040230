"""Shared configuration for unit tests.

Unit tests never build a full Console; they exercise one component with
hand-written loaders or handlers.
"""

from __future__ import annotations

import pytest


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Auto-apply ``@pytest.mark.unit`` to every test collected here."""
    unit_marker = pytest.mark.unit
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(unit_marker)
