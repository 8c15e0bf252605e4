"""
Shared fixtures for the IRIS Finder test suite.

This conftest provides:
- Settings built without the host environment or .env file
- A mocked AsyncSession and a query-result factory
- Reusable sample IRIS rows
"""
from __future__ import annotations

import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

# Central Paris, used across the suite.
PARIS_LAT = 48.8566
PARIS_LON = 2.3522

_HOST_ENV_KEYS = ("PORT", "DATABASE_URL", "ZENMAP_DATABASE_URL", "NODE_ENV")


# ---------------------------------------------------------------------------
# Sample data factories
# ---------------------------------------------------------------------------
def make_iris_zone(
    *,
    code_iris: str = "751041401",
    nom_iris: str | None = "Saint-Merri 1",
    **extra,
) -> dict:
    """Return a dict shaped like one ``json_agg`` element of the IRIS table."""
    zone = {
        "code_iris": code_iris,
        "nom_iris": nom_iris,
        "insee_com": code_iris[:5],
        "nom_com": "Paris 4e Arrondissement",
    }
    zone.update(extra)
    return zone


def make_result(total: int = 0, results: list | None = None, *, empty: bool = False) -> MagicMock:
    """Return a mock ``Result`` whose single row carries total/results."""
    result = MagicMock()
    if empty:
        result.one_or_none.return_value = None
        return result
    row = MagicMock()
    row.total = total
    row.results = results
    result.one_or_none.return_value = row
    return result


def clean_env(**overrides: str) -> dict[str, str]:
    """Host environment stripped of IRIS_* and the bare PaaS variables, plus overrides."""
    env = {
        k: v for k, v in os.environ.items()
        if not k.startswith("IRIS_") and k not in _HOST_ENV_KEYS
    }
    env.update(overrides)
    return env


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def settings():
    from app.config import Settings

    with patch.dict(os.environ, clean_env(), clear=True):
        return Settings(_env_file=None)


@pytest.fixture()
def mock_session():
    return AsyncMock()
