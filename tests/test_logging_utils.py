"""Tests for :mod:`playback_negotiator.logging_utils`."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterator

import pytest

from playback_negotiator import logging_utils


@pytest.fixture
def restore_logging() -> Iterator[None]:
    yield
    logging_utils.configure_logging(level="INFO", log_file="")


def test_get_logger_returns_package_children() -> None:
    base = logging_utils.get_logger()
    assert base.name == "playback_negotiator"
    assert logging_utils.get_logger("playback_negotiator.resolver").name == "playback_negotiator.resolver"
    assert logging_utils.get_logger("custom").name == "playback_negotiator.custom"
    assert base.propagate is False


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("debug", logging.DEBUG), (" WARNING ", logging.WARNING), ("10", 10), ("bogus", logging.INFO)],
)
def test_coerce_level(raw: str, expected: int) -> None:
    assert logging_utils._coerce_level(raw) == expected


def test_configure_logging_writes_to_requested_file(
    tmp_path: Path, restore_logging: None
) -> None:
    log_file = tmp_path / "logs" / "negotiator.log"
    logger = logging_utils.configure_logging(level="DEBUG", log_file=str(log_file))

    assert logger.level == logging.DEBUG
    assert logging_utils.get_log_file_path() == log_file

    logging_utils.get_logger("tests").info("file logging works")
    for handler in logger.handlers:
        handler.flush()
    contents = log_file.read_text(encoding="utf8")
    assert "[INFO] playback_negotiator.tests: file logging works" in contents


def test_empty_destination_disables_file_logging(
    tmp_path: Path, restore_logging: None
) -> None:
    log_path = tmp_path / "a.log"
    logging_utils.configure_logging(log_file=str(log_path))
    logging_utils.configure_logging(log_file="")

    assert logging_utils.get_log_file_path() is None
    logger = logging.getLogger("playback_negotiator")
    assert not any(
        getattr(handler, "baseFilename", None) == str(log_path) for handler in logger.handlers
    )


def test_decision_payload_reaches_log_file(tmp_path: Path, restore_logging: None) -> None:
    from playback_negotiator.media import (
        MediaItemDescriptor,
        MediaSourceDescriptor,
        MediaStreamDescriptor,
        StreamKind,
    )
    from playback_negotiator.resolver import PlaybackModeResolver

    log_file = tmp_path / "decisions.log"
    logger = logging_utils.configure_logging(level="DEBUG", log_file=str(log_file))
    source = MediaSourceDescriptor(
        container="mkv",
        streams=(
            MediaStreamDescriptor(StreamKind.VIDEO, "h264"),
            MediaStreamDescriptor(StreamKind.AUDIO, "aac"),
        ),
    )
    PlaybackModeResolver().resolve(MediaItemDescriptor(sources=(source,), item_id="movie-7"))
    for handler in logger.handlers:
        handler.flush()

    lines = [
        line for line in log_file.read_text(encoding="utf8").splitlines() if "decision=" in line
    ]
    assert lines
    payload = json.loads(lines[-1].split("decision=", 1)[1])
    assert payload["mode"] == "Remux"
    assert payload["item_id"] == "movie-7"
    assert payload["container_supported"] is False


def test_decision_formatter_leaves_plain_records_alone() -> None:
    formatter = logging_utils.DecisionFormatter()
    record = logging.LogRecord("playback_negotiator", logging.INFO, __file__, 1, "plain", None, None)
    assert formatter.format(record).endswith("playback_negotiator: plain")
    record.playback_decision = {"mode": "Transcode"}
    assert formatter.format(record).endswith('plain decision={"mode": "Transcode"}')


def test_environment_level_is_honoured(
    monkeypatch: pytest.MonkeyPatch, restore_logging: None
) -> None:
    monkeypatch.setenv("PLAYBACK_NEGOTIATOR_LOG_LEVEL", "warning")
    logger = logging_utils.configure_logging()
    assert logger.level == logging.WARNING


def test_configure_logging_is_idempotent(restore_logging: None) -> None:
    logger = logging_utils.configure_logging()
    count = len(logger.handlers)
    logging_utils.configure_logging()
    logging_utils.configure_logging(level="ERROR")
    assert len(logger.handlers) == count
