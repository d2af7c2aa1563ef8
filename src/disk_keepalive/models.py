"""Domain models for sampled disk activity."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ActivityCounters:
    """Cumulative sector counters sampled from the stats file at one point in time."""

    sectors_read: int
    sectors_written: int

    def differs_from(self, other: ActivityCounters) -> bool:
        return (
            self.sectors_read != other.sectors_read
            or self.sectors_written != other.sectors_written
        )


@dataclass(slots=True)
class MonitorState:
    baseline: ActivityCounters
    idle_seconds: int = 0
    parking_allowed: bool = False

    def mark_active(self, counters: ActivityCounters) -> None:
        self.baseline = counters
        self.idle_seconds = 0
        self.parking_allowed = False
