"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from tests.fixtures.generate_fixtures import generate_fixtures, sample_records
from thermal_hotspots.models.records import RecordStore


@pytest.fixture
def temp_data_dir(tmp_path: Path) -> Path:
    """Empty data directory."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def sample_store() -> RecordStore:
    """Sample records, in memory."""
    return sample_records()


@pytest.fixture
def cli_data_dir(tmp_path: Path) -> Path:
    """Data directory populated with the sample JSON files."""
    data_dir = tmp_path / "data"
    generate_fixtures(data_dir)
    return data_dir


@pytest.fixture
def cli_env(cli_data_dir: Path, tmp_path: Path) -> dict[str, str]:
    """Environment pointing the CLI at the sample data and away from user config."""
    return {
        "THERMAL_HOTSPOTS_DATA_DIR": str(cli_data_dir),
        "THERMAL_HOTSPOTS_CONFIG": str(tmp_path / "no-config.toml"),
    }


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()
