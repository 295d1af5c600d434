"""Configuration management for thermal-hotspots.

Handles loading configuration from TOML files, environment variables,
and command-line options with proper precedence.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from thermal_hotspots.lib.paths import HOTSPOTS_FILENAME, THERMALS_FILENAME
from thermal_hotspots.models.state import Basemap

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


DEFAULT_CONFIG_PATH = Path.home() / ".config" / "thermal-hotspots" / "config.toml"
LOCAL_CONFIG_NAME = ".thermal-hotspots.toml"
DEFAULT_DATA_DIR = Path("./data")


class ConfigError(ValueError):
    """Raised when a configuration value cannot be used."""


@dataclass
class DataConfig:
    """Data file configuration."""

    directory: Path = field(default_factory=lambda: DEFAULT_DATA_DIR)
    hotspots_file: str = HOTSPOTS_FILENAME
    thermals_file: str = THERMALS_FILENAME


@dataclass
class DisplayConfig:
    """Map display configuration."""

    # Circle radius in metres is max(radius_floor, radius_scale * avgClimbKts)
    radius_floor: float = 180.0
    radius_scale: float = 160.0
    basemap: Basemap = Basemap.STREET
    show_list: bool = False
    initial_view: tuple[float, float, int] | None = None


@dataclass
class ServerConfig:
    """Local preview server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class Config:
    """Main configuration container."""

    data: DataConfig = field(default_factory=DataConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    config_path: Path | None = None


def _get_env_value(key: str, default: str = "") -> str:
    """Get environment variable value."""
    return os.environ.get(key, default)


def parse_basemap(value: str) -> Basemap:
    """Parse a basemap name.

    Args:
        value: Basemap name (street, satellite, topo or dark).

    Returns:
        Matching Basemap.

    Raises:
        ConfigError: If the name is unknown.
    """
    try:
        return Basemap(value.strip().lower())
    except ValueError:
        choices = ", ".join(b.value for b in Basemap)
        raise ConfigError(f"Unknown basemap {value!r} (expected one of: {choices})") from None


def parse_initial_view(value: Any) -> tuple[float, float, int]:
    """Parse an ``[lat, lon, zoom]`` triple.

    Raises:
        ConfigError: If the value is not a three-element numeric sequence.
    """
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ConfigError(f"initial_view must be [lat, lon, zoom], got {value!r}")
    try:
        return (float(value[0]), float(value[1]), int(value[2]))
    except (TypeError, ValueError):
        raise ConfigError(f"initial_view must be numeric, got {value!r}") from None


def _find_config_path() -> Path:
    """Locate the configuration file when none was given explicitly."""
    env_config = _get_env_value("THERMAL_HOTSPOTS_CONFIG")
    if env_config:
        return Path(env_config)

    local_config = Path(LOCAL_CONFIG_NAME)
    if local_config.exists():
        return local_config

    return DEFAULT_CONFIG_PATH


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from file and environment variables.

    Configuration is loaded with the following precedence (highest to lowest):
    1. Environment variables
    2. Configuration file
    3. Default values

    Args:
        config_path: Path to configuration file. If None, looks at
            THERMAL_HOTSPOTS_CONFIG, then ./.thermal-hotspots.toml, then the
            per-user default location.

    Returns:
        Populated Config object.
    """
    config = Config()

    if config_path is None:
        config_path = _find_config_path()

    config.config_path = config_path

    if config_path.exists():
        config = _load_from_file(config_path, config)

    config = _apply_env_overrides(config)

    return config


def _load_from_file(path: Path, config: Config) -> Config:
    """Load configuration from TOML file.

    Args:
        path: Path to TOML file.
        config: Existing config to update.

    Returns:
        Updated Config object.
    """
    with open(path, "rb") as f:
        data = tomllib.load(f)

    if "data" in data:
        data_section = data["data"]
        if "directory" in data_section:
            config.data.directory = Path(data_section["directory"])
        config.data.hotspots_file = data_section.get("hotspots_file", config.data.hotspots_file)
        config.data.thermals_file = data_section.get("thermals_file", config.data.thermals_file)

    if "display" in data:
        display = data["display"]
        config.display.radius_floor = float(display.get("radius_floor", config.display.radius_floor))
        config.display.radius_scale = float(display.get("radius_scale", config.display.radius_scale))
        config.display.show_list = bool(display.get("show_list", config.display.show_list))
        if "basemap" in display:
            config.display.basemap = parse_basemap(display["basemap"])
        if "initial_view" in display:
            config.display.initial_view = parse_initial_view(display["initial_view"])

    if "server" in data:
        server = data["server"]
        config.server.host = server.get("host", config.server.host)
        config.server.port = int(server.get("port", config.server.port))

    return config


def _apply_env_overrides(config: Config) -> Config:
    """Apply environment variable overrides to configuration.

    Args:
        config: Config to update.

    Returns:
        Updated Config object.
    """
    if data_dir := _get_env_value("THERMAL_HOTSPOTS_DATA_DIR"):
        config.data.directory = Path(data_dir)

    if basemap := _get_env_value("THERMAL_HOTSPOTS_BASEMAP"):
        config.display.basemap = parse_basemap(basemap)

    return config
