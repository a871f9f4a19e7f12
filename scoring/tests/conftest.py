"""Shared test fixtures for innings scoring engine tests."""

from __future__ import annotations

import pytest

from scoring.config import InningsConfig, MatchFormat


@pytest.fixture
def t20_config() -> InningsConfig:
    """Standard first-innings T20 configuration."""
    return InningsConfig.for_format(MatchFormat.T20)


@pytest.fixture
def player_names() -> dict[str, str]:
    return {
        "A": "Alpha",
        "B": "Bravo",
        "C": "Charlie",
        "X": "Xray",
        "Y": "Yankee",
        "F": "Foxtrot",
    }
