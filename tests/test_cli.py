"""Tests for the command line interface."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from playback_negotiator import cli


def _write_item(path: Path, container: str, video: str, audio: str) -> Path:
    payload = {
        "Id": path.stem,
        "Name": path.stem,
        "MediaSources": [
            {
                "Container": container,
                "MediaStreams": [
                    {"Type": "Video", "Codec": video},
                    {"Type": "Audio", "Codec": audio},
                ],
            }
        ],
    }
    path.write_text(json.dumps(payload), encoding="utf8")
    return path


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "missing-config.yaml"


def test_prints_mode_for_each_item(
    tmp_path: Path, config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    movie = _write_item(tmp_path / "movie.json", "mkv", "h264", "aac")
    show = _write_item(tmp_path / "show.json", "mp4", "h264", "aac")

    status = cli.main(["--config", str(config_path), str(movie), str(show)])

    assert status == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0].startswith(f"{movie}: Remux - Container change only")
    assert lines[1].startswith(f"{show}: Direct Play - ")


def test_explain_prints_supported_flags(
    tmp_path: Path, config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    item = _write_item(tmp_path / "item.json", "mp4", "h264", "dts")

    cli.main(["--config", str(config_path), "--explain", str(item)])

    out = capsys.readouterr().out
    assert "Direct Stream" in out
    assert "container: mp4 (supported: yes)" in out
    assert "audio:     dts (supported: no)" in out


def test_streaming_mode_caps_result(
    tmp_path: Path, config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    item = _write_item(tmp_path / "item.json", "mp4", "h264", "aac")

    cli.main(["--config", str(config_path), "--streaming-mode", "transcode", str(item)])

    assert ": Transcode - " in capsys.readouterr().out


def test_profile_from_config_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "profiles:\n  - name: mkv-box\n    containers: mkv\n", encoding="utf8"
    )
    item = _write_item(tmp_path / "item.json", "mkv", "h264", "aac")

    cli.main(["--config", str(config_path), "--profile", "mkv-box", str(item)])

    assert ": Direct Play - " in capsys.readouterr().out


def test_list_profiles(config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["--config", str(config_path), "--list-profiles"]) == 0
    assert capsys.readouterr().out.strip().splitlines() == ["appletv"]


def test_unknown_profile_exits_with_usage_error(
    tmp_path: Path, config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    item = _write_item(tmp_path / "item.json", "mp4", "h264", "aac")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--config", str(config_path), "--profile", "toaster", str(item)])

    assert excinfo.value.code == 2
    assert "toaster" in capsys.readouterr().err


def test_bad_files_are_reported_and_processing_continues(
    tmp_path: Path, config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{oops", encoding="utf8")
    missing = tmp_path / "missing.json"
    good = _write_item(tmp_path / "good.json", "avi", "av1", "flac")

    status = cli.main(["--config", str(config_path), str(broken), str(missing), str(good)])

    captured = capsys.readouterr()
    assert status == 1
    assert f"{broken}: error:" in captured.err
    assert f"{missing}: error:" in captured.err
    assert f"{good}: Transcode - " in captured.out


def test_requires_item_files(config_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--config", str(config_path)])
    assert excinfo.value.code == 2


def test_rejects_unknown_streaming_mode(config_path: Path) -> None:
    with pytest.raises(SystemExit):
        cli.parse_args(["--streaming-mode", "fastest", "item.json"])
