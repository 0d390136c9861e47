"""Playback modes and their static presentation data."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping

__all__ = ["PlaybackMode"]


@dataclass(frozen=True, slots=True)
class _ModeDetails:
    label: str
    quality: str
    server_cpu: str
    summary: str
    play_method: str


class PlaybackMode(Enum):
    """How a media item reaches the device, from cheapest to most expensive."""

    DIRECT_PLAY = "DirectPlay"
    DIRECT_STREAM = "DirectStream"
    REMUX = "Remux"
    TRANSCODE = "Transcode"

    @property
    def label(self) -> str:
        return _DETAILS[self].label

    @property
    def quality(self) -> str:
        return _DETAILS[self].quality

    @property
    def server_cpu(self) -> str:
        return _DETAILS[self].server_cpu

    @property
    def description(self) -> str:
        """Human readable summary including quality tier and server cost."""

        details = _DETAILS[self]
        return f"{details.summary} ({details.quality}, {details.server_cpu} Server CPU)"

    @property
    def play_method(self) -> str:
        """Value reported to Jellyfin as the session ``PlayMethod``."""

        return _DETAILS[self].play_method

    @property
    def requires_transcoding_endpoint(self) -> bool:
        # Anything but the untouched file goes through the server's stream endpoint.
        return self is not PlaybackMode.DIRECT_PLAY


_DETAILS: Mapping[PlaybackMode, _ModeDetails] = {
    PlaybackMode.DIRECT_PLAY: _ModeDetails(
        label="Direct Play",
        quality="Best Quality",
        server_cpu="0%",
        summary="Original file, hardware decoded on device",
        play_method="DirectPlay",
    ),
    PlaybackMode.DIRECT_STREAM: _ModeDetails(
        label="Direct Stream",
        quality="Excellent Quality",
        server_cpu="5-10%",
        summary="Original video + transcoded audio, hardware decoded",
        play_method="DirectStream",
    ),
    PlaybackMode.REMUX: _ModeDetails(
        label="Remux",
        quality="Excellent Quality",
        server_cpu="10-20%",
        summary="Container change only (MKV to MP4), hardware decoded",
        play_method="DirectStream",
    ),
    PlaybackMode.TRANSCODE: _ModeDetails(
        label="Transcode",
        quality="Reduced Quality",
        server_cpu="80-100%",
        summary="Full re-encode on server",
        play_method="Transcode",
    ),
}
