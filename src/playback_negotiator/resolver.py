"""Decide how a media item can be played on a given device class."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Callable, Iterable, Optional

from .capabilities import DEFAULT_REGISTRY, CapabilityRegistry
from .logging_utils import DECISION_ATTRIBUTE, get_logger
from .media import MediaItemDescriptor
from .modes import PlaybackMode
from .preferences import StreamingPreference, apply_preference

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PlaybackDecision:
    """Trace of a single classification: the inputs checked and the outcome."""

    mode: PlaybackMode
    video_supported: bool = False
    audio_supported: bool = False
    container_supported: bool = False
    has_source: bool = False
    container: Optional[str] = None
    video_codec: Optional[str] = None
    audio_codec: Optional[str] = None
    item_id: Optional[str] = None
    item_name: Optional[str] = None

    def as_dict(self) -> dict[str, object]:
        """Return a flat, serializable representation of the decision."""

        data = asdict(self)
        data["mode"] = self.mode.value
        return data


DecisionObserver = Callable[[PlaybackDecision], None]


def log_decision(decision: PlaybackDecision) -> None:
    """Default observer: emit the decision as a structured debug record."""

    log.debug(
        "Playback mode %s for item %s: container=%s (%s) video=%s (%s) audio=%s (%s)",
        decision.mode.value,
        decision.item_id or decision.item_name or "<unknown>",
        decision.container,
        decision.container_supported,
        decision.video_codec,
        decision.video_supported,
        decision.audio_codec,
        decision.audio_supported,
        extra={DECISION_ATTRIBUTE: decision.as_dict()},
    )


def _select_mode(video_ok: bool, audio_ok: bool, container_ok: bool) -> PlaybackMode:
    # First match wins; an audio transcode already repackages the stream, so
    # the container only matters when both codecs pass.
    if video_ok and audio_ok and container_ok:
        return PlaybackMode.DIRECT_PLAY
    if video_ok and audio_ok:
        return PlaybackMode.REMUX
    if video_ok:
        return PlaybackMode.DIRECT_STREAM
    return PlaybackMode.TRANSCODE


class PlaybackModeResolver:
    """Classify media items against an immutable :class:`CapabilityRegistry`.

    The resolver holds no mutable state and may be shared between threads.
    Every input maps to a mode; missing sources, streams or identifiers count
    as unsupported, so the conservative result is :attr:`PlaybackMode.TRANSCODE`.
    """

    __slots__ = ("_registry", "_observers")

    def __init__(
        self,
        registry: CapabilityRegistry = DEFAULT_REGISTRY,
        *,
        observers: Optional[Iterable[DecisionObserver]] = None,
    ) -> None:
        self._registry = registry
        self._observers: tuple[DecisionObserver, ...] = (
            (log_decision,) if observers is None else tuple(observers)
        )

    @property
    def registry(self) -> CapabilityRegistry:
        return self._registry

    def explain(self, item: MediaItemDescriptor) -> PlaybackDecision:
        """Return the full decision trace for ``item`` without notifying observers."""

        source = item.primary_source
        if source is None:
            return PlaybackDecision(
                mode=PlaybackMode.TRANSCODE,
                item_id=item.item_id,
                item_name=item.name,
            )

        video_stream = source.video_stream
        audio_stream = source.audio_stream
        video_codec = video_stream.codec if video_stream is not None else None
        audio_codec = audio_stream.codec if audio_stream is not None else None

        video_ok = self._registry.is_video_codec_supported(video_codec)
        audio_ok = self._registry.is_audio_codec_supported(audio_codec)
        container_ok = self._registry.is_container_supported(source.container)

        return PlaybackDecision(
            mode=_select_mode(video_ok, audio_ok, container_ok),
            video_supported=video_ok,
            audio_supported=audio_ok,
            container_supported=container_ok,
            has_source=True,
            container=source.container,
            video_codec=video_codec,
            audio_codec=audio_codec,
            item_id=item.item_id,
            item_name=item.name,
        )

    def resolve(self, item: MediaItemDescriptor) -> PlaybackMode:
        decision = self.explain(item)
        self._notify(decision)
        return decision.mode

    def resolve_with_preference(
        self, item: MediaItemDescriptor, preference: StreamingPreference
    ) -> PlaybackMode:
        """Resolve ``item`` and cap the result by the user's streaming preference."""

        mode = apply_preference(self.resolve(item), preference)
        log.debug("Applied streaming preference %s: %s", preference.value, mode.value)
        return mode

    def can_direct_play(self, item: MediaItemDescriptor) -> bool:
        return self.resolve(item) is PlaybackMode.DIRECT_PLAY

    def can_direct_stream(self, item: MediaItemDescriptor) -> bool:
        """True when the video passes through without a re-encode."""

        return self.resolve(item) in (PlaybackMode.DIRECT_STREAM, PlaybackMode.REMUX)

    def _notify(self, decision: PlaybackDecision) -> None:
        for observer in self._observers:
            try:
                observer(decision)
            except Exception:
                log.exception("Playback decision observer %r failed", observer)


def resolve(
    item: MediaItemDescriptor, *, registry: CapabilityRegistry = DEFAULT_REGISTRY
) -> PlaybackMode:
    return PlaybackModeResolver(registry).resolve(item)


def can_direct_play(
    item: MediaItemDescriptor, *, registry: CapabilityRegistry = DEFAULT_REGISTRY
) -> bool:
    return PlaybackModeResolver(registry).can_direct_play(item)


def can_direct_stream(
    item: MediaItemDescriptor, *, registry: CapabilityRegistry = DEFAULT_REGISTRY
) -> bool:
    return PlaybackModeResolver(registry).can_direct_stream(item)


__all__ = [
    "DecisionObserver",
    "PlaybackDecision",
    "PlaybackMode",
    "PlaybackModeResolver",
    "can_direct_play",
    "can_direct_stream",
    "log_decision",
    "resolve",
]
