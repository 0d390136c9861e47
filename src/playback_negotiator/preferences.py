"""User streaming preference applied on top of the resolved playback mode."""
from __future__ import annotations

from enum import Enum
from typing import Optional

from .modes import PlaybackMode

__all__ = ["StreamingPreference", "apply_preference"]


class StreamingPreference(Enum):
    """Streaming mode selected in the client settings."""

    AUTO = "Auto"
    DIRECT_PLAY = "DirectPlay"
    DIRECT_STREAM = "DirectStream"
    TRANSCODE = "Transcode"

    @classmethod
    def parse(cls, value: str) -> "StreamingPreference":
        """Parse ``value`` such as ``"Direct Play"`` or ``"direct_stream"``.

        Raises :class:`ValueError` for unknown values.
        """

        token = "".join(ch for ch in value.lower() if ch not in " -_")
        for member in cls:
            if member.value.lower() == token:
                return member
        raise ValueError(f"Unknown streaming mode: {value!r}")


# Higher rank means less server work and better quality.
_RANK = {
    PlaybackMode.TRANSCODE: 0,
    PlaybackMode.DIRECT_STREAM: 1,
    PlaybackMode.REMUX: 2,
    PlaybackMode.DIRECT_PLAY: 3,
}

_CAPS: dict[StreamingPreference, Optional[PlaybackMode]] = {
    StreamingPreference.AUTO: None,
    StreamingPreference.DIRECT_PLAY: None,
    StreamingPreference.DIRECT_STREAM: PlaybackMode.REMUX,
    StreamingPreference.TRANSCODE: PlaybackMode.TRANSCODE,
}


def apply_preference(mode: PlaybackMode, preference: StreamingPreference) -> PlaybackMode:
    """Cap ``mode`` by ``preference``; a preference never upgrades a mode."""

    cap = _CAPS[preference]
    if cap is None or _RANK[mode] <= _RANK[cap]:
        return mode
    return cap
