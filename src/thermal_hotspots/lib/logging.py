"""Logging configuration for thermal-hotspots.

Console logging at a configurable level, plus an optional DEBUG-level log
file inside the data directory.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from thermal_hotspots.lib.paths import get_logs_dir

if TYPE_CHECKING:
    from thermal_hotspots.config import Config

# Module logger
logger = logging.getLogger("thermal_hotspots")


def verbosity_to_level(verbose: int, quiet: bool = False) -> int:
    """Map CLI verbosity flags to a console log level.

    Args:
        verbose: Number of -v flags given.
        quiet: Whether -q was given.

    Returns:
        Logging level for the console handler.
    """
    if quiet:
        return logging.WARNING
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING


def setup_logging(
    config: "Config | None" = None,
    log_dir: Path | None = None,
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
    log_to_file: bool = False,
) -> logging.Logger:
    """Set up logging for thermal-hotspots.

    Creates handlers for:
    - Console output on stderr at ``console_level``
    - File output at ``file_level`` in the logs/ directory, when requested

    Args:
        config: Application config (for log_dir from data directory).
        log_dir: Explicit log directory path.
        console_level: Log level for console output.
        file_level: Log level for file output.
        log_to_file: Whether to also write a timestamped log file.

    Returns:
        Configured logger.
    """
    # Clear existing handlers
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    if not log_to_file:
        return logger

    if log_dir is None:
        if config is not None:
            log_dir = get_logs_dir(config.data.directory)
        else:
            log_dir = Path("logs")

    log_dir.mkdir(parents=True, exist_ok=True)

    # ISO 8601 basic format keeps file names sortable
    timestamp = datetime.now().strftime("%Y%m%dT%H%M%S")
    log_file = log_dir / f"thermal-hotspots-{timestamp}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(file_handler)

    logger.debug("Logging initialized. Log file: %s", log_file)

    return logger
