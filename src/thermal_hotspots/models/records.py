"""Thermal and hotspot records and their loading.

Both collections are static, pre-aggregated JSON arrays shipped alongside the
map. They are loaded once and never mutated; malformed records are rejected at
load time so that everything downstream can assume well-formed input.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from thermal_hotspots.lib.paths import (
    HOTSPOTS_FILENAME,
    THERMALS_FILENAME,
    get_hotspots_path,
    get_thermals_path,
)

logger = logging.getLogger("thermal_hotspots.records")


class RecordError(ValueError):
    """Raised when a data file or one of its records is malformed."""


def _require(data: dict[str, Any], key: str) -> Any:
    if key not in data or data[key] is None:
        raise RecordError(f"missing required field {key!r}")
    return data[key]


def _as_float(value: Any, key: str) -> float:
    # bool is an int subclass, but true/false is never a coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RecordError(f"field {key!r} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise RecordError(f"field {key!r} must be finite, got {value!r}")
    return float(value)


def _as_optional_float(value: Any, key: str) -> float | None:
    if value is None:
        return None
    return _as_float(value, key)


def _as_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise RecordError(f"field {key!r} must be a string, got {value!r}")
    return value


@dataclass(frozen=True)
class Thermal:
    """A single observed climb sample."""

    lat: float
    lon: float
    pilot: str
    flight: str
    avg_climb_kts: float | None = None
    avg_climb_fpm: float | None = None
    alt_ft: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the on-disk JSON shape."""
        return {
            "lat": self.lat,
            "lon": self.lon,
            "pilot": self.pilot,
            "avgClimbKts": self.avg_climb_kts,
            "avgClimbFpm": self.avg_climb_fpm,
            "altFt": self.alt_ft,
            "flight": self.flight,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Thermal:
        """Create a Thermal from its JSON representation.

        Raises:
            RecordError: If a required field is missing or has the wrong type.
        """
        return cls(
            lat=_as_float(_require(data, "lat"), "lat"),
            lon=_as_float(_require(data, "lon"), "lon"),
            pilot=_as_str(_require(data, "pilot"), "pilot"),
            flight=_as_str(_require(data, "flight"), "flight"),
            avg_climb_kts=_as_optional_float(data.get("avgClimbKts"), "avgClimbKts"),
            avg_climb_fpm=_as_optional_float(data.get("avgClimbFpm"), "avgClimbFpm"),
            alt_ft=_as_optional_float(data.get("altFt"), "altFt"),
        )


@dataclass(frozen=True)
class Hotspot:
    """A pre-aggregated cluster of thermal samples at a recurring lift location.

    ``pilot`` is a single attribution even when several pilots contributed
    to the cluster.
    """

    id: str
    name: str
    lat: float
    lon: float
    avg_climb_kts: float
    count: int
    pilot: str
    flights: tuple[str, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the on-disk JSON shape."""
        return {
            "id": self.id,
            "name": self.name,
            "lat": self.lat,
            "lon": self.lon,
            "avgClimbKts": self.avg_climb_kts,
            "count": self.count,
            "pilot": self.pilot,
            "flights": list(self.flights) if self.flights is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Hotspot:
        """Create a Hotspot from its JSON representation.

        Raises:
            RecordError: If a required field is missing, has the wrong type,
                or ``count`` is below 1.
        """
        count = _require(data, "count")
        if isinstance(count, bool) or not isinstance(count, int):
            raise RecordError(f"field 'count' must be an integer, got {count!r}")
        if count < 1:
            raise RecordError(f"field 'count' must be >= 1, got {count}")

        flights = data.get("flights")
        if flights is not None:
            if not isinstance(flights, list):
                raise RecordError(f"field 'flights' must be a list, got {flights!r}")
            flights = tuple(_as_str(f, "flights") for f in flights)

        return cls(
            id=_as_str(_require(data, "id"), "id"),
            name=_as_str(_require(data, "name"), "name"),
            lat=_as_float(_require(data, "lat"), "lat"),
            lon=_as_float(_require(data, "lon"), "lon"),
            avg_climb_kts=_as_float(_require(data, "avgClimbKts"), "avgClimbKts"),
            count=count,
            pilot=_as_str(_require(data, "pilot"), "pilot"),
            flights=flights,
        )


@dataclass(frozen=True)
class RecordStore:
    """The two immutable collections available to the map."""

    thermals: tuple[Thermal, ...] = field(default_factory=tuple)
    hotspots: tuple[Hotspot, ...] = field(default_factory=tuple)


def _read_array(path: Path) -> list[Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise RecordError(f"{path}: invalid JSON ({e})") from e

    if not isinstance(data, list):
        raise RecordError(f"{path}: expected a JSON array, got {type(data).__name__}")
    return data


def _parse_records(path: Path, rows: list[Any], parse: Any) -> list[Any]:
    records = []
    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            raise RecordError(f"{path}: record {index} is not an object")
        try:
            records.append(parse(row))
        except RecordError as e:
            raise RecordError(f"{path}: record {index}: {e}") from None
    return records


def load_hotspots(path: Path) -> tuple[Hotspot, ...]:
    """Load hotspots from a JSON file.

    Args:
        path: Path to hotspots.json.

    Returns:
        Hotspots in file order.

    Raises:
        RecordError: If the file is missing or malformed, or ids repeat.
    """
    if not path.exists():
        raise RecordError(f"Hotspots file not found: {path}")

    hotspots = _parse_records(path, _read_array(path), Hotspot.from_dict)

    seen: set[str] = set()
    for index, hotspot in enumerate(hotspots):
        if hotspot.id in seen:
            raise RecordError(f"{path}: record {index}: duplicate hotspot id {hotspot.id!r}")
        seen.add(hotspot.id)

    logger.debug("Loaded %d hotspots from %s", len(hotspots), path)
    return tuple(hotspots)


def load_thermals(path: Path) -> tuple[Thermal, ...]:
    """Load thermal samples from a JSON file.

    A missing file yields no thermals.

    Raises:
        RecordError: If the file exists but is malformed.
    """
    if not path.exists():
        logger.warning("Thermals file not found: %s", path)
        return ()

    thermals = _parse_records(path, _read_array(path), Thermal.from_dict)
    logger.debug("Loaded %d thermals from %s", len(thermals), path)
    return tuple(thermals)


def load_records(
    data_dir: Path,
    hotspots_file: str | None = None,
    thermals_file: str | None = None,
) -> RecordStore:
    """Load both collections from a data directory.

    Args:
        data_dir: Directory holding the JSON files.
        hotspots_file: Hotspots file name override.
        thermals_file: Thermals file name override.

    Returns:
        Populated RecordStore.
    """
    hotspots_path = get_hotspots_path(data_dir, hotspots_file or HOTSPOTS_FILENAME)
    thermals_path = get_thermals_path(data_dir, thermals_file or THERMALS_FILENAME)

    return RecordStore(
        thermals=load_thermals(thermals_path),
        hotspots=load_hotspots(hotspots_path),
    )
