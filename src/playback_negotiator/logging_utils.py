"""Logging helpers for :mod:`playback_negotiator`.

The package logger writes human readable lines to stderr and, unless disabled,
to a log file. Records carrying a ``playback_decision`` payload (see
:func:`playback_negotiator.resolver.log_decision`) get the payload appended as
JSON in the file, so every classification can be audited after the fact.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

__all__ = [
    "DECISION_ATTRIBUTE",
    "DecisionFormatter",
    "configure_logging",
    "get_log_file_path",
    "get_logger",
]

LOGGER_NAME = "playback_negotiator"
DECISION_ATTRIBUTE = "playback_decision"

_ENV_LEVEL = "PLAYBACK_NEGOTIATOR_LOG_LEVEL"
_ENV_FILE = "PLAYBACK_NEGOTIATOR_LOG_FILE"
_DEFAULT_LOG_PATH = Path.home() / ".cache" / "playback_negotiator.log"
_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class DecisionFormatter(logging.Formatter):
    """Formatter that appends a record's playback decision as compact JSON."""

    def __init__(self) -> None:
        super().__init__(fmt=_FORMAT, datefmt=_DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        payload = getattr(record, DECISION_ATTRIBUTE, None)
        if payload is None:
            return line
        return f"{line} decision={json.dumps(payload, sort_keys=True, default=str)}"


@dataclass
class _LoggingState:
    configured: bool = False
    level: int = logging.INFO
    stream_handler: Optional[logging.Handler] = None
    file_handler: Optional[logging.FileHandler] = None
    log_path: Optional[Path] = None


_state = _LoggingState()


def _coerce_level(value: str) -> int:
    """Return a logging level derived from *value* (name or number)."""

    normalized = value.strip().upper()
    if normalized.isdigit():
        level = int(normalized)
        if 0 <= level <= logging.CRITICAL:
            return level
    return getattr(logging, normalized, logging.INFO)


def _requested_level(level: Optional[str]) -> int:
    raw = level if level is not None else os.getenv(_ENV_LEVEL)
    if raw is None:
        return _state.level if _state.configured else logging.INFO
    return _coerce_level(raw)


def _requested_destination(log_file: Optional[str]) -> Optional[str]:
    """Return the file destination to apply, or ``None`` to leave it alone.

    An empty string disables file logging. On first configuration the default
    path under ``~/.cache`` applies when nothing else is given.
    """

    if log_file is not None:
        return log_file
    env_file = os.getenv(_ENV_FILE)
    if env_file is not None:
        return env_file
    return None if _state.configured else str(_DEFAULT_LOG_PATH)


def _replace_file_handler(logger: logging.Logger, destination: str) -> None:
    if _state.file_handler is not None:
        logger.removeHandler(_state.file_handler)
        _state.file_handler.close()
        _state.file_handler = None
        _state.log_path = None
    if not destination:
        return

    log_path = Path(destination).expanduser()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf8")
    except OSError:
        logger.warning("Failed to set up file logging at %s", log_path)
        return
    handler.setFormatter(DecisionFormatter())
    logger.addHandler(handler)
    _state.file_handler = handler
    _state.log_path = log_path
    logger.debug("File logging enabled at %s", log_path)


def configure_logging(
    *,
    level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Configure the package logger; later calls adjust level and log file.

    ``level`` overrides ``PLAYBACK_NEGOTIATOR_LOG_LEVEL`` and ``log_file``
    overrides ``PLAYBACK_NEGOTIATOR_LOG_FILE``.
    """

    logger = logging.getLogger(LOGGER_NAME)
    log_level = _requested_level(level)
    destination = _requested_destination(log_file)

    if not _state.configured:
        logger.propagate = False
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT))
        logger.addHandler(stream_handler)
        _state.stream_handler = stream_handler
        _state.configured = True

    if destination is not None:
        _replace_file_handler(logger, destination)

    _state.level = log_level
    logger.setLevel(log_level)
    for handler in (_state.stream_handler, _state.file_handler):
        if handler is not None:
            handler.setLevel(log_level)
    logger.debug("Logging configured with level %s", logging.getLevelName(log_level))
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the package logger or one of its children."""

    base = configure_logging()
    if not name or name == LOGGER_NAME:
        return base
    if name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def get_log_file_path() -> Optional[Path]:
    """Return the active log file path, if file logging is enabled."""

    return _state.log_path
