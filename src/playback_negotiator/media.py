"""Media item descriptors built from Jellyfin metadata."""
from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from .logging_utils import get_logger

log = get_logger(__name__)


class StreamKind(Enum):
    """Kind of an elementary stream inside a media source."""

    VIDEO = "Video"
    AUDIO = "Audio"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: object) -> "StreamKind":
        """Map a Jellyfin ``Type`` value onto a stream kind."""

        if isinstance(value, str):
            normalized = value.lower()
            if normalized == "video":
                return cls.VIDEO
            if normalized == "audio":
                return cls.AUDIO
        return cls.OTHER


@dataclass(frozen=True, slots=True)
class MediaStreamDescriptor:
    """One elementary stream (video, audio, subtitle...) of a media source."""

    kind: StreamKind
    codec: Optional[str] = None


@dataclass(frozen=True, slots=True)
class MediaSourceDescriptor:
    """A playable media source: a container plus its ordered streams."""

    container: Optional[str] = None
    streams: tuple[MediaStreamDescriptor, ...] = ()

    def first_stream(self, kind: StreamKind) -> Optional[MediaStreamDescriptor]:
        """Return the first stream of ``kind`` or ``None``."""

        for stream in self.streams:
            if stream.kind is kind:
                return stream
        return None

    @property
    def video_stream(self) -> Optional[MediaStreamDescriptor]:
        return self.first_stream(StreamKind.VIDEO)

    @property
    def audio_stream(self) -> Optional[MediaStreamDescriptor]:
        return self.first_stream(StreamKind.AUDIO)


@dataclass(frozen=True, slots=True)
class MediaItemDescriptor:
    """A media item with zero or more sources, ordered by server preference."""

    sources: tuple[MediaSourceDescriptor, ...] = ()
    item_id: Optional[str] = None
    name: Optional[str] = None

    @property
    def primary_source(self) -> Optional[MediaSourceDescriptor]:
        return self.sources[0] if self.sources else None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "MediaItemDescriptor":
        """Build a descriptor from a Jellyfin item or ``PlaybackInfo`` response.

        Malformed entries are skipped rather than rejected so that a partially
        broken response still yields a (conservative) decision.
        """

        if not isinstance(payload, Mapping):
            log.warning("Ignoring media payload of type %s", type(payload).__name__)
            return cls()
        item_id = _optional_str(payload.get("Id"))
        name = _optional_str(payload.get("Name"))
        sources_raw = payload.get("MediaSources")
        sources: list[MediaSourceDescriptor] = []
        if sources_raw is not None and not isinstance(sources_raw, list):
            log.warning("MediaSources for item %s is not a list; ignoring", item_id)
            sources_raw = None
        for entry in sources_raw or []:
            if not isinstance(entry, Mapping):
                log.warning("Skipping malformed media source on item %s: %r", item_id, entry)
                continue
            sources.append(_parse_source(entry, item_id))
        log.debug("Parsed item %s (%s) with %d media source(s)", item_id, name, len(sources))
        return cls(sources=tuple(sources), item_id=item_id, name=name)

    @classmethod
    def from_json(cls, text: str) -> "MediaItemDescriptor":
        """Parse ``text`` as JSON and build a descriptor from it."""

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid media item JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise ValueError("Media item JSON must be an object")
        return cls.from_payload(payload)


def _optional_str(value: object) -> Optional[str]:
    return value if isinstance(value, str) else None


def _parse_source(entry: Mapping[str, Any], item_id: Optional[str]) -> MediaSourceDescriptor:
    streams_raw = entry.get("MediaStreams")
    if streams_raw is not None and not isinstance(streams_raw, list):
        log.warning("MediaStreams for item %s is not a list; ignoring", item_id)
        streams_raw = None
    streams: list[MediaStreamDescriptor] = []
    for stream in streams_raw or []:
        if not isinstance(stream, Mapping):
            log.warning("Skipping malformed media stream on item %s: %r", item_id, stream)
            continue
        streams.append(
            MediaStreamDescriptor(
                kind=StreamKind.parse(stream.get("Type")),
                codec=_optional_str(stream.get("Codec")),
            )
        )
    return MediaSourceDescriptor(
        container=_optional_str(entry.get("Container")),
        streams=tuple(streams),
    )


__all__ = [
    "MediaItemDescriptor",
    "MediaSourceDescriptor",
    "MediaStreamDescriptor",
    "StreamKind",
]
