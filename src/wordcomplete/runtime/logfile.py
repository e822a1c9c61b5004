"""Startup-time log file resolution and logging setup."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Mapping, Optional

from . import telemetry

LOG_FILE_NAME = "wordcomplete.log"
LOG_DIRECTORY_NAME = "xi-core"


def data_local_dir(
    *, platform: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
) -> Optional[Path]:
    """Return the per-user local data directory for ``platform``, if known."""

    platform = platform or sys.platform
    env = os.environ if environ is None else environ
    if platform.startswith("win"):
        local = env.get("LOCALAPPDATA")
        return Path(local) if local else None
    home = env.get("HOME")
    if platform == "darwin":
        return Path(home) / "Library" / "Application Support" if home else None
    xdg = env.get("XDG_DATA_HOME")
    if xdg and Path(xdg).is_absolute():
        return Path(xdg)
    return Path(home) / ".local" / "share" if home else None


def generate_logging_path(
    *, platform: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
) -> Path:
    """Return ``<data dir>/xi-core/wordcomplete.log``.

    Raises ``FileNotFoundError`` when the platform has no known data directory.
    """

    base = data_local_dir(platform=platform, environ=environ)
    if base is None:
        raise FileNotFoundError("No standard logging directory known for this platform")
    return base / LOG_DIRECTORY_NAME / LOG_FILE_NAME


def create_log_directory(path_with_file: Path) -> None:
    if not path_with_file.name:
        raise ValueError(
            f"Unable to get the parent of {path_with_file}, the path should contain a file name"
        )
    path_with_file.parent.mkdir(parents=True, exist_ok=True)


def setup_logging(logging_path: Optional[Path] = None) -> telemetry.TelemetryConfig:
    """Configure stderr logging plus an optional log file.

    The level follows ``XI_LOG`` (``trace``/``debug`` enable debug output).
    """

    config = telemetry.TelemetryConfig()
    config.with_min_level(telemetry.level_from_xi_log(os.getenv("XI_LOG")))
    config.with_console_output(True)
    if logging_path is not None:
        create_log_directory(logging_path)
        config.with_file_output(logging_path)

    telemetry.configure(config=config)
    log = telemetry.get_logger("wordcomplete.runtime")
    log.info("Logging is set up")
    if logging_path is not None:
        log.info("Writing logs to: %s", logging_path)
    else:
        log.warning(
            "No path was supplied for the log file. Not saving logs to disk, "
            "falling back to just stderr"
        )
    return config


def init_logging() -> telemetry.TelemetryConfig:
    """Resolve the default log path and set up logging, tolerating a missing data dir."""

    try:
        path: Optional[Path] = generate_logging_path()
    except FileNotFoundError:
        path = None
    return setup_logging(path)


__all__ = [
    "LOG_DIRECTORY_NAME",
    "LOG_FILE_NAME",
    "create_log_directory",
    "data_local_dir",
    "generate_logging_path",
    "init_logging",
    "setup_logging",
]
