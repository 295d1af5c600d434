"""Data file locations for thermal-hotspots.

The data directory holds the two pre-aggregated JSON files::

    data/
      hotspots.json
      thermals.json
      logs/
"""

from __future__ import annotations

from pathlib import Path

HOTSPOTS_FILENAME = "hotspots.json"
THERMALS_FILENAME = "thermals.json"
LOGS_DIRNAME = "logs"


def get_hotspots_path(data_dir: Path, filename: str = HOTSPOTS_FILENAME) -> Path:
    """Get path to the hotspots file."""
    return data_dir / filename


def get_thermals_path(data_dir: Path, filename: str = THERMALS_FILENAME) -> Path:
    """Get path to the thermals file."""
    return data_dir / filename


def get_logs_dir(data_dir: Path) -> Path:
    """Get path to the log directory inside the data directory."""
    return data_dir / LOGS_DIRNAME
