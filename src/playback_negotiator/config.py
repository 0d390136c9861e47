"""Configuration management for the playback negotiator."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from .capabilities import (
    BUILTIN_PROFILES,
    DEFAULT_PROFILE_NAME,
    DEFAULT_REGISTRY,
    CapabilityRegistry,
    DeviceProfile,
)
from .logging_utils import get_logger
from .preferences import StreamingPreference

CONFIG_PATH = Path.home() / ".config" / "playback_negotiator" / "config.yaml"

log = get_logger(__name__)


@dataclass(slots=True)
class AppConfig:
    """Top level application configuration."""

    device_profile: str = DEFAULT_PROFILE_NAME
    streaming_mode: StreamingPreference = StreamingPreference.AUTO
    profiles: list[DeviceProfile] = field(default_factory=list)

    def add_or_update(self, profile: DeviceProfile) -> None:
        """Insert or update a device profile by name."""

        for index, existing in enumerate(self.profiles):
            if existing.name == profile.name:
                self.profiles[index] = profile
                return
        self.profiles.append(profile)

    def remove(self, profile_name: str) -> None:
        """Remove a configured profile by name if it exists."""

        self.profiles = [p for p in self.profiles if p.name != profile_name]

    def names(self) -> Iterable[str]:
        """Return built-in and configured profile names."""

        names = list(BUILTIN_PROFILES)
        for profile in self.profiles:
            if profile.name not in names:
                names.append(profile.name)
        return names

    def registry_for(self, name: Optional[str] = None) -> CapabilityRegistry:
        """Return the registry for ``name`` (default: the selected profile).

        Configured profiles take precedence over built-in ones.
        """

        wanted = name or self.device_profile
        for profile in self.profiles:
            if profile.name == wanted:
                return profile.registry
        builtin = BUILTIN_PROFILES.get(wanted)
        if builtin is not None:
            return builtin.registry
        raise KeyError(
            f"Unknown device profile {wanted!r}; available: {', '.join(self.names())}"
        )


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _clean_scalar(value: str) -> str:
    value = value.strip()
    # Only a single matching pair, so '"a", "b"' stays intact for splitting.
    if len(value) >= 2 and value[0] in "'\"" and value[-1] == value[0] and value[0] not in value[1:-1]:
        value = value[1:-1]
    return value


def _parse_identifiers(value: object, field_name: str, profile: str) -> Optional[list[str]]:
    """Coerce a comma-separated string or list into identifiers.

    ``None`` means the field inherits the default registry; that is also the
    result for empty or unreadable values.
    """

    if value is None:
        return None
    items: Iterable[object]
    if isinstance(value, str) and value.strip().startswith("["):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            log.warning("Ignoring unreadable %s list for profile %s: %r", field_name, profile, value)
            return None
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, list):
        items = value
    else:
        log.warning("Ignoring %s of type %s for profile %s", field_name, type(value).__name__, profile)
        return None
    identifiers = [_clean_scalar(str(item)) for item in items]
    identifiers = [identifier for identifier in identifiers if identifier]
    if not identifiers:
        log.warning("Empty %s for profile %s; keeping defaults", field_name, profile)
        return None
    return identifiers


def _parse_config(raw: str) -> dict[str, object]:
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        pass

    result: dict[str, object] = {}
    current_list: Optional[list[dict[str, object]]] = None
    current_item: Optional[dict[str, object]] = None
    # Block list nested under an item key such as "video_codecs:".
    current_values: Optional[list[str]] = None
    item_indent = 0
    for line in raw.splitlines():
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        indent = len(line) - len(line.lstrip())
        stripped = line.strip()
        if current_values is not None and indent > item_indent and stripped.startswith("-"):
            current_values.append(_clean_scalar(stripped[1:]))
            continue
        current_values = None
        if not line.startswith(" "):
            key, _, remainder = line.partition(":")
            key = key.strip()
            value = remainder.strip()
            if value == "[]":
                result[key] = []
                current_list = None
            elif value:
                result[key] = _clean_scalar(value)
                current_list = None
            else:
                current_list = []
                result[key] = current_list
            current_item = None
            continue
        if line.strip().startswith("-"):
            current_item = {}
            item_indent = indent
            if current_list is not None:
                current_list.append(current_item)
            remainder = line.strip()[1:].strip()
            if remainder and current_item is not None:
                current_values = _store_item_field(current_item, remainder)
            continue
        if current_item is not None:
            current_values = _store_item_field(current_item, stripped)
    return result


def _store_item_field(item: dict[str, object], text: str) -> Optional[list[str]]:
    """Store ``key: value`` in ``item``; an empty value opens a block list."""

    key, _, value = text.partition(":")
    if value.strip():
        item[key.strip()] = _clean_scalar(value)
        return None
    values: list[str] = []
    item[key.strip()] = values
    return values


def _dump_config(data: AppConfig) -> str:
    lines: list[str] = [
        "device_profile: " + data.device_profile,
        "streaming_mode: " + data.streaming_mode.value,
    ]
    if data.profiles:
        lines.append("profiles:")
        for profile in data.profiles:
            registry = profile.registry
            lines.append("  - name: " + profile.name)
            lines.append("    video_codecs: " + ", ".join(sorted(registry.video_codecs)))
            lines.append("    audio_codecs: " + ", ".join(sorted(registry.audio_codecs)))
            lines.append("    containers: " + ", ".join(sorted(registry.containers)))
    else:
        lines.append("profiles: []")
    lines.append("")
    return "\n".join(lines)


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load configuration from *path* or return an empty configuration."""

    config_path = path or CONFIG_PATH
    if not config_path.exists():
        log.info("Configuration file missing at %s; using defaults", config_path)
        return AppConfig()
    log.debug("Loading configuration from %s", config_path)
    raw = config_path.read_text(encoding="utf8")
    data = _parse_config(raw)
    if not isinstance(data, dict):  # pragma: no cover - invalid config guard
        log.warning("Ignoring configuration at %s: expected a mapping", config_path)
        return AppConfig()

    device_profile = DEFAULT_PROFILE_NAME
    profile_raw = data.get("device_profile")
    if isinstance(profile_raw, str) and profile_raw.strip():
        device_profile = profile_raw.strip()

    streaming_mode = StreamingPreference.AUTO
    mode_raw = data.get("streaming_mode")
    if isinstance(mode_raw, str) and mode_raw.strip():
        try:
            streaming_mode = StreamingPreference.parse(mode_raw)
        except ValueError:
            log.warning("Ignoring invalid streaming_mode %r; using Auto", mode_raw)

    profiles: list[DeviceProfile] = []
    profiles_raw = data.get("profiles", [])
    for entry in profiles_raw if isinstance(profiles_raw, list) else []:
        if not isinstance(entry, dict):  # pragma: no cover - invalid config guard
            continue
        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            log.warning("Skipping device profile without a name: %s", entry)
            continue
        profile_name = name.strip()
        registry = DEFAULT_REGISTRY.with_overrides(
            video=_parse_identifiers(entry.get("video_codecs"), "video_codecs", profile_name),
            audio=_parse_identifiers(entry.get("audio_codecs"), "audio_codecs", profile_name),
            containers=_parse_identifiers(entry.get("containers"), "containers", profile_name),
        )
        profiles.append(DeviceProfile(name=profile_name, registry=registry))
    log.info(
        "Loaded %d device profile(s) from %s (selected: %s)",
        len(profiles),
        config_path,
        device_profile,
    )
    return AppConfig(
        device_profile=device_profile,
        streaming_mode=streaming_mode,
        profiles=profiles,
    )


def save_config(config: AppConfig, path: Optional[Path] = None) -> None:
    """Persist *config* to disk at *path*."""

    config_path = path or CONFIG_PATH
    log.debug("Writing configuration with %d profiles to %s", len(config.profiles), config_path)
    _ensure_parent(config_path)
    config_path.write_text(_dump_config(config), encoding="utf8")
    log.info("Configuration saved to %s", config_path)


__all__ = [
    "AppConfig",
    "CONFIG_PATH",
    "load_config",
    "save_config",
]
