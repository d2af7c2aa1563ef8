"""Reader for the per-device sysfs ``stat`` counters."""

from __future__ import annotations

import logging
from pathlib import Path

from .errors import StatsUnavailable
from .models import ActivityCounters

logger = logging.getLogger(__name__)

# 0-based positions of "sectors read" and "sectors written" in /sys/block/<dev>/stat
_SECTORS_READ_FIELD = 2
_SECTORS_WRITTEN_FIELD = 6


def read_counters(path: Path) -> ActivityCounters:
    """Sample the cumulative sector counters from ``path``.

    The file is opened fresh on every call; sysfs attributes keep
    returning the old values through a handle that is only rewound.
    """
    try:
        with open(path, "rb") as fo:
            fields = fo.read().split()
    except OSError as exc:
        raise StatsUnavailable(f"Could not get stats from file {path}: {exc}") from exc

    counters = _parse_fields(fields)
    if counters is None:
        raise StatsUnavailable(f"Could not get stats from file {path}")
    logger.debug("Read=%d, Wrote=%d", counters.sectors_read, counters.sectors_written)
    return counters


def _parse_fields(fields: list[bytes]) -> ActivityCounters | None:
    if len(fields) <= _SECTORS_WRITTEN_FIELD:
        return None
    read_raw = fields[_SECTORS_READ_FIELD]
    written_raw = fields[_SECTORS_WRITTEN_FIELD]
    if not (read_raw.isdigit() and written_raw.isdigit()):
        return None
    return ActivityCounters(sectors_read=int(read_raw), sectors_written=int(written_raw))
