"""Shared pytest fixtures and test helpers for frontiermetrix tests."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from frontiermetrix.domain.models import AssetFlow, AssetSignal

SIGNAL_RECORDS: list[dict[str, Any]] = [
    {
        "id": "sig-btc",
        "name": "Bitcoin",
        "type": "crypto",
        "latitude": 37.77,
        "longitude": -122.42,
        "value": 64250.5,
        "risk": "high",
        "country": "US",
        "ts": "2025-01-20T12:00:00.000Z",
    },
    {
        "id": "sig-ust",
        "name": "US Treasury 10Y",
        "type": "bond",
        "latitude": 40.71,
        "longitude": -74.01,
        "value": 4.21,
        "risk": "low",
        "country": "US",
        "ts": "2025-01-20T13:00:00.000Z",
    },
    {
        "id": "sig-eur",
        "name": "Euro",
        "type": "currency",
        "latitude": 50.11,
        "longitude": 8.68,
        "value": 1.04,
        "risk": "medium",
        "country": "DE",
        "ts": "2025-01-20T12:00:00.000Z",
    },
    {
        "id": "sig-usdt",
        "name": "Tether",
        "type": "stablecoin",
        "latitude": 22.32,
        "longitude": 114.17,
        "value": 1.0,
        "risk": "extreme",
        "country": "HK",
        "ts": "2025-01-20T15:00:00Z",
    },
]

FLOW_RECORDS: list[dict[str, Any]] = [
    {
        "id": "flow-ny-ldn",
        "fromLat": 40.71,
        "fromLon": -74.01,
        "toLat": 51.51,
        "toLon": -0.13,
        "magnitude": 1.5,
        "classTag": "crypto",
        "ts": "2025-01-20T12:00:00.000Z",
    },
    {
        "id": "flow-tyo-syd",
        "fromLat": 35.68,
        "fromLon": 139.69,
        "toLat": -33.87,
        "toLon": 151.21,
        "magnitude": 0.2,
        "classTag": "bond",
        "ts": "2025-01-20T14:00:00.000Z",
    },
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep FRONTIERMETRIX_* variables from the outer shell out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("FRONTIERMETRIX_"):
            monkeypatch.delenv(key)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


def write_dataset(
    data_dir: Path,
    signals: list[Any] | None = None,
    flows: list[Any] | None = None,
) -> Path:
    """Write seed files into *data_dir* (created if needed)."""
    data_dir.mkdir(parents=True, exist_ok=True)
    (data_dir / "seed_assets.json").write_text(
        json.dumps(SIGNAL_RECORDS if signals is None else signals), encoding="utf-8"
    )
    (data_dir / "seed_flows.json").write_text(
        json.dumps(FLOW_RECORDS if flows is None else flows), encoding="utf-8"
    )
    return data_dir


@pytest.fixture
def make_data_dir() -> Any:
    """The :func:`write_dataset` helper, for tests that need custom records."""
    return write_dataset


@pytest.fixture
def signal_records() -> list[dict[str, Any]]:
    return copy.deepcopy(SIGNAL_RECORDS)


@pytest.fixture
def flow_records() -> list[dict[str, Any]]:
    return copy.deepcopy(FLOW_RECORDS)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Data directory holding the standard four signals and two flows."""
    return write_dataset(tmp_path / "data")


@pytest.fixture
def signals() -> list[AssetSignal]:
    return [AssetSignal.model_validate(r) for r in SIGNAL_RECORDS]


@pytest.fixture
def flows() -> list[AssetFlow]:
    return [AssetFlow.model_validate(r) for r in FLOW_RECORDS]


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp project root holding ``data/`` seed files.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command test
    classes so the default ``[data] data_dir`` resolves to the fixture data.
    """
    write_dataset(tmp_path / "data")
    monkeypatch.chdir(tmp_path)
