"""Textual widget showing the playback mode as a coloured badge."""
from __future__ import annotations

from typing import Optional

from rich.text import Text
from textual.widgets import Static

from .modes import PlaybackMode

__all__ = ["PlaybackModeBadge", "badge_for_mode"]

_BADGE_COLOURS = {
    PlaybackMode.DIRECT_PLAY: "green",
    PlaybackMode.REMUX: "cyan",
    PlaybackMode.DIRECT_STREAM: "yellow",
    PlaybackMode.TRANSCODE: "red",
}


def badge_for_mode(mode: PlaybackMode) -> tuple[str, str]:
    """Return the badge label and Rich colour for ``mode``."""

    return mode.label, _BADGE_COLOURS[mode]


class PlaybackModeBadge(Static):
    """Compact quality/cost indicator for a resolved playback mode."""

    def __init__(
        self,
        mode: Optional[PlaybackMode] = None,
        *,
        id: Optional[str] = None,
    ) -> None:
        super().__init__("", id=id)
        self.mode: Optional[PlaybackMode] = None
        self.set_mode(mode)

    def set_mode(self, mode: Optional[PlaybackMode]) -> None:
        """Display ``mode``; ``None`` clears the badge."""

        self.mode = mode
        if mode is None:
            self.tooltip = None
            self.update("")
            return
        label, colour = badge_for_mode(mode)
        self.tooltip = mode.description
        self.update(Text(f" {label} ", style=f"bold {colour}"))
