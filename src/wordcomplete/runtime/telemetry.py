"""Telemetry services built on the standard ``logging`` module.

This module exposes a narrow surface area for the rest of the plugin:

``configure(...)`` -- override the logging configuration
``get_logger(name)`` -- fetch (and cache) a configured logger
``record_event(name, ...)`` -- emit structured events at a chosen level
``span(name, ...)`` -- context manager timing a block with attached metadata
"""

from __future__ import annotations

import json
import logging
import os
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, MutableMapping, Optional

ENV_PREFIX = "WORDCOMPLETE_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "wordcomplete")
DEFAULT_LOG_FILE = os.getenv(f"{ENV_PREFIX}LOG_FILE", "")

_LOGGER_CACHE: MutableMapping[str, logging.Logger] = {}
_INSTALLED_HANDLERS: list[logging.Handler] = []

_TEXT_FORMAT = "[%(asctime)s][%(name)s][%(levelname)s] %(message)s"
_DATE_FORMAT = "%Y-%m-%d][%H:%M:%S"


@dataclass
class TelemetryConfig:
    """Handler layout applied to the package logger."""

    min_level: str = "INFO"
    console_output: bool = True
    json_format: bool = False
    file_output: Optional[str] = None

    def with_min_level(self, level: str) -> "TelemetryConfig":
        self.min_level = level.upper()
        return self

    def with_console_output(self, enabled: bool) -> "TelemetryConfig":
        self.console_output = enabled
        return self

    def with_json_format(self, enabled: bool) -> "TelemetryConfig":
        self.json_format = enabled
        return self

    def with_file_output(self, path: str | os.PathLike[str]) -> "TelemetryConfig":
        self.file_output = os.fspath(path)
        return self


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": self.formatTime(record, _DATE_FORMAT),
            "logger": record.name,
            "level": record.levelname,
            "message": record.getMessage(),
        }
        fields = getattr(record, "fields", None)
        if fields:
            payload.update(fields)
        return json.dumps(payload, ensure_ascii=False)


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_flag(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _format_pairs(data: Dict[str, Any]) -> str:
    return " ".join(f"{key}={_stringify(value)}" for key, value in data.items())


def level_from_xi_log(raw: Optional[str]) -> str:
    """Map the host's ``XI_LOG`` convention onto a logging level name."""

    if raw is None:
        return "INFO"
    if raw.lower() in {"trace", "debug"}:
        return "DEBUG"
    return "INFO"


def _resolve_level() -> str:
    explicit = _env("LOG_LEVEL")
    if explicit:
        return explicit.upper()
    return level_from_xi_log(os.getenv("XI_LOG"))


def _build_default_config() -> TelemetryConfig:
    config = TelemetryConfig()
    config.with_min_level(_resolve_level())
    config.with_console_output(not _env_flag("DISABLE_CONSOLE", False))

    if _env_flag("LOG_JSON", False):
        config.with_json_format(True)

    log_file = _env("LOG_FILE") or DEFAULT_LOG_FILE
    if log_file:
        config.with_file_output(log_file)

    return config


def _install(config: TelemetryConfig) -> None:
    root = logging.getLogger(DEFAULT_LOGGER_NAME)
    for handler in _INSTALLED_HANDLERS:
        root.removeHandler(handler)
        handler.close()
    _INSTALLED_HANDLERS.clear()

    formatter: logging.Formatter
    if config.json_format:
        formatter = _JsonFormatter()
    else:
        formatter = logging.Formatter(fmt=_TEXT_FORMAT, datefmt=_DATE_FORMAT)

    if config.console_output:
        _INSTALLED_HANDLERS.append(logging.StreamHandler())
    if config.file_output:
        target = Path(config.file_output).expanduser()
        target.parent.mkdir(parents=True, exist_ok=True)
        _INSTALLED_HANDLERS.append(logging.FileHandler(target, encoding="utf-8"))

    for handler in _INSTALLED_HANDLERS:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(config.min_level)


def configure(*, config: Optional[TelemetryConfig] = None) -> TelemetryConfig:
    """Override the active logging configuration.

    Parameters
    ----------
    config:
        Explicit ``TelemetryConfig`` instance to adopt. When omitted the
        configuration is rebuilt from ``WORDCOMPLETE_*`` and ``XI_LOG``.
    """

    if config is None:
        config = _build_default_config()

    _install(config)
    _LOGGER_CACHE.clear()
    return config


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a cached logger nested under the package logger."""

    logger_name = name or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        _LOGGER_CACHE[logger_name] = logging.getLogger(logger_name)
    return _LOGGER_CACHE[logger_name]


def _level_number(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unsupported log level '{level}'.")
    return resolved


def record_event(
    name: str,
    *,
    level: str | int = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit a structured ``event::<name>`` record with key/value payload."""

    log = get_logger(logger_name)
    payload = {"event": name, **(data or {})}
    log.log(
        _level_number(level),
        "event::%s %s",
        name,
        _format_pairs(payload),
        extra={"fields": {key: _stringify(value) for key, value in payload.items()}},
    )


@dataclass
class SpanHandle:
    """Handle returned from ``span`` for optional metadata updates."""

    logger: logging.Logger
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    started: float = field(default_factory=time.perf_counter)

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.started) * 1000.0

    def _emit(
        self, level: str, message: str, extra: Optional[Dict[str, Any]] = None
    ) -> None:
        payload = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        if extra:
            payload.update({key: _stringify(val) for key, val in extra.items()})
        self.logger.log(
            _level_number(level),
            "%s %s",
            message,
            _format_pairs(payload),
            extra={"fields": payload},
        )

    def finish(self) -> None:
        self._emit("debug", "span::end", {"elapsed_ms": f"{self.elapsed_ms:.3f}"})

    def fail(self, reason: str) -> None:
        self._emit("error", "span::fail", {"reason": reason})


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Time a code block and log its outcome.

    Parameters
    ----------
    name:
        Operation name written on every span record.
    logger_name:
        Target logger; defaults to the package logger.
    component:
        If ``True`` use the same name as the span; if a string, use it as the
        component identifier.
    metadata:
        Optional metadata attached to the span records.
    """

    log = get_logger(logger_name)
    component_name = None
    if component is True:
        component_name = name
    elif isinstance(component, str):
        component_name = component

    handle = SpanHandle(
        logger=log,
        span_name=name,
        component_name=component_name,
        metadata={key: _stringify(value) for key, value in (metadata or {}).items()},
    )
    try:
        yield handle
    except Exception as exc:
        handle.fail(str(exc))
        raise
    else:
        handle.finish()


# Initialize the package logger once the config is ready.
configure()
logger = get_logger()

__all__ = [
    "SpanHandle",
    "TelemetryConfig",
    "configure",
    "get_logger",
    "level_from_xi_log",
    "record_event",
    "span",
    "logger",
]
