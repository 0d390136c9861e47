"""Hardware decode capabilities of playback device classes."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

__all__ = [
    "BUILTIN_PROFILES",
    "CapabilityRegistry",
    "DEFAULT_PROFILE_NAME",
    "DEFAULT_REGISTRY",
    "DeviceProfile",
]


def _normalize(values: Iterable[str]) -> frozenset[str]:
    return frozenset(value.lower() for value in values)


def _contains(members: frozenset[str], value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.lower() in members


@dataclass(frozen=True, slots=True)
class CapabilityRegistry:
    """Codec and container identifiers a device class handles natively.

    Identifiers are stored lowercased and queries fold case, so ``"HEVC"`` and
    ``"hevc"`` are equivalent. ``None`` is never supported.
    """

    video_codecs: frozenset[str] = frozenset()
    audio_codecs: frozenset[str] = frozenset()
    containers: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "video_codecs", _normalize(self.video_codecs))
        object.__setattr__(self, "audio_codecs", _normalize(self.audio_codecs))
        object.__setattr__(self, "containers", _normalize(self.containers))

    @classmethod
    def from_iterables(
        cls,
        *,
        video: Iterable[str] = (),
        audio: Iterable[str] = (),
        containers: Iterable[str] = (),
    ) -> "CapabilityRegistry":
        return cls(
            video_codecs=frozenset(video),
            audio_codecs=frozenset(audio),
            containers=frozenset(containers),
        )

    def with_overrides(
        self,
        *,
        video: Optional[Iterable[str]] = None,
        audio: Optional[Iterable[str]] = None,
        containers: Optional[Iterable[str]] = None,
    ) -> "CapabilityRegistry":
        """Return a copy with the given categories replaced."""

        return CapabilityRegistry(
            video_codecs=self.video_codecs if video is None else frozenset(video),
            audio_codecs=self.audio_codecs if audio is None else frozenset(audio),
            containers=self.containers if containers is None else frozenset(containers),
        )

    def is_video_codec_supported(self, codec: Optional[str]) -> bool:
        return _contains(self.video_codecs, codec)

    def is_audio_codec_supported(self, codec: Optional[str]) -> bool:
        return _contains(self.audio_codecs, codec)

    def is_container_supported(self, container: Optional[str]) -> bool:
        return _contains(self.containers, container)


DEFAULT_REGISTRY = CapabilityRegistry.from_iterables(
    video=(
        # H.264/AVC
        "h264", "avc", "avc1",
        # HEVC/H.265
        "hevc", "h265", "hvc1", "hev1",
        "vp9", "vp09",
        "mpeg4",
    ),
    audio=(
        "aac", "mp4a",
        "mp3", "mp3a",
        # Dolby
        "ac3", "eac3", "ec-3",
        "flac", "alac",
        "pcm", "pcm_s16le", "pcm_s24le",
    ),
    containers=("mp4", "m4v", "mov", "ts", "m2ts"),
)
"""Hardware decode set of the Apple TV device class."""


@dataclass(frozen=True, slots=True)
class DeviceProfile:
    """A named device class and its capability registry."""

    name: str
    registry: CapabilityRegistry


DEFAULT_PROFILE_NAME = "appletv"

BUILTIN_PROFILES: Mapping[str, DeviceProfile] = {
    DEFAULT_PROFILE_NAME: DeviceProfile(DEFAULT_PROFILE_NAME, DEFAULT_REGISTRY),
}
