"""Helpers for locating the block device and its sysfs stats file."""

from __future__ import annotations

from pathlib import Path


DEFAULT_DEVICE = Path("/dev/sda")
SYSFS_BLOCK_DIR = Path("/sys/block")


def default_stats_path(device: Path) -> Path:
    """Return the sysfs stat file that belongs to ``device``.

    Symlinks such as ``/dev/disk/by-id/...`` are resolved to the kernel name.
    """
    return SYSFS_BLOCK_DIR / Path(device).resolve().name / "stat"
