"""Command line entry point for the playback negotiator."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterable

from .capabilities import CapabilityRegistry
from .config import CONFIG_PATH, AppConfig, load_config
from .logging_utils import configure_logging, get_logger
from .media import MediaItemDescriptor
from .preferences import StreamingPreference
from .resolver import PlaybackDecision, PlaybackModeResolver

log = get_logger(__name__)


def _streaming_mode(value: str) -> StreamingPreference:
    try:
        return StreamingPreference.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="playback-negotiator",
        description="Decide how Jellyfin media items can be played on a device class",
    )
    parser.add_argument(
        "items",
        nargs="*",
        type=Path,
        help="JSON files holding Jellyfin items or PlaybackInfo responses",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=CONFIG_PATH,
        help="Path to configuration file (default: %(default)s)",
    )
    parser.add_argument(
        "--profile",
        default=None,
        help="Device profile to evaluate against (default: from configuration)",
    )
    parser.add_argument(
        "--streaming-mode",
        type=_streaming_mode,
        default=None,
        help="Cap the result: Auto, DirectPlay, DirectStream or Transcode",
    )
    parser.add_argument(
        "--explain",
        action="store_true",
        help="Show which of container, video and audio are supported.",
    )
    parser.add_argument(
        "--list-profiles",
        action="store_true",
        help="List available device profiles and exit.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override PLAYBACK_NEGOTIATOR_LOG_LEVEL for this invocation",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help=(
            "Write logs to this file instead of the default or"
            " PLAYBACK_NEGOTIATOR_LOG_FILE"
        ),
    )
    return parser


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def _flag(value: bool) -> str:
    return "yes" if value else "no"


def _print_explanation(decision: PlaybackDecision) -> None:
    if not decision.has_source:
        print("    no media source")
        return
    print(f"    container: {decision.container or '-'} (supported: {_flag(decision.container_supported)})")
    print(f"    video:     {decision.video_codec or '-'} (supported: {_flag(decision.video_supported)})")
    print(f"    audio:     {decision.audio_codec or '-'} (supported: {_flag(decision.audio_supported)})")


def _registry_for(parser: argparse.ArgumentParser, config: AppConfig, name: str | None) -> CapabilityRegistry:
    try:
        return config.registry_for(name)
    except KeyError as exc:
        parser.error(exc.args[0])


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(
        level=args.log_level,
        log_file=str(args.log_file) if args.log_file is not None else None,
    )
    log.info("CLI invoked with config=%s", args.config)
    config = load_config(args.config)
    if args.list_profiles:
        for name in config.names():
            print(name)
        return 0
    if not args.items:
        parser.error("at least one item file is required")

    registry = _registry_for(parser, config, args.profile)
    preference = args.streaming_mode or config.streaming_mode
    resolver = PlaybackModeResolver(registry)

    status = 0
    for path in args.items:
        try:
            item = MediaItemDescriptor.from_json(path.read_text(encoding="utf8"))
        except (OSError, ValueError) as exc:
            log.error("Failed to read media item from %s: %s", path, exc)
            print(f"{path}: error: {exc}", file=sys.stderr)
            status = 1
            continue
        mode = resolver.resolve_with_preference(item, preference)
        print(f"{path}: {mode.label} - {mode.description}")
        if args.explain:
            _print_explanation(resolver.explain(item))
    return status


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
