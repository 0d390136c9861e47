"""Playback capability negotiation for Jellyfin-compatible media clients."""

__version__ = "0.1.0"
