"""Exceptions raised by the keep-alive monitor."""

from __future__ import annotations


class KeepaliveError(Exception):
    """Base class for all disk-keepalive failures."""


class ConfigurationError(KeepaliveError):
    """Invalid command-line settings; fatal before the monitor starts."""


class StatsUnavailable(KeepaliveError):
    """The stats file could not be opened or parsed."""


class DeviceOpenFailure(KeepaliveError):
    """The raw block device could not be opened for reading."""


class ForkFailure(KeepaliveError):
    """Detaching into the background failed."""
