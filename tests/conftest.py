"""
Pytest configuration and fixtures for campaign-fields tests.
"""

from typing import Any

import pytest

from campaign_fields.core.config import settings
from campaign_fields.formula.parser import FormulaParser


@pytest.fixture
def parser() -> FormulaParser:
    """Shared formula parser."""
    return FormulaParser()


@pytest.fixture
def hero_fields() -> dict[str, Any]:
    """Field values of a typical player character."""
    return {
        "name": "Aragorn",
        "class": "Ranger",
        "level": 5,
        "might": 3,
        "agility": 2,
        "maxHP": 60,
        "currentHP": 25,
        "isMounted": False,
    }


@pytest.fixture
def strict_numbers(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reject Infinity/NaN results for the duration of a test."""
    monkeypatch.setattr(settings, "reject_non_finite_numbers", True)
