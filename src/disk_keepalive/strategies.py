"""Keep-alive actions that reset the drive firmware's idle timer."""

from __future__ import annotations

import logging
import os
import random
import subprocess
from pathlib import Path
from typing import Callable, Optional

from .config import HDPARM_PROG, MonitorSettings, ResetMethod
from .errors import DeviceOpenFailure

logger = logging.getLogger(__name__)

MIN_DEVICE_CAPACITY = 1024 * 1024 * 1024  # assume every drive holds at least 1 GiB


def run_command(command: str) -> None:
    """Run ``command`` through the shell; output and exit status are ignored."""
    subprocess.run(command, shell=True, check=False)


class ResetStrategy:
    """A zero-argument keep-alive action."""

    # True when reset() itself moves the sectors-read counter.
    perturbs_read_counter = False

    def reset(self) -> None:
        raise NotImplementedError

    def close(self) -> None:
        pass


class RandomReadReset(ResetStrategy):
    """Reads one byte from a random offset of the raw device.

    Read-only, so nothing on the drive is worn by writes, but the head
    moves on every call.
    """

    perturbs_read_counter = True

    def __init__(
        self,
        device: Path,
        live: bool,
        rng: Optional[random.Random] = None,
        capacity: int = MIN_DEVICE_CAPACITY,
    ) -> None:
        self.device = Path(device)
        self.live = live
        self.capacity = capacity
        self._rng = rng or random.Random()
        self._fd: Optional[int] = None
        self._disabled = False

    def reset(self) -> None:
        if not self.live:
            logger.debug("Not reading in testing (non-live) mode")
            return
        if self._disabled:
            logger.debug("Random read disabled; %s could not be opened", self.device)
            return
        if self._fd is None:
            try:
                self._fd = self._open_device()
            except DeviceOpenFailure as exc:
                logger.error("%s", exc)
                self._disabled = True
                return

        offset = self._rng.randrange(self.capacity)
        try:
            position = os.lseek(self._fd, offset, os.SEEK_SET)
            logger.debug("Reading %dth byte from %s", position, self.device)
            os.read(self._fd, 1)
        except OSError as exc:
            logger.warning("Random read from %s failed: %s", self.device, exc)

    def close(self) -> None:
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None

    def _open_device(self) -> int:
        try:
            return os.open(self.device, os.O_RDONLY)
        except OSError as exc:
            raise DeviceOpenFailure(f"Can't read from device {self.device}: {exc}") from exc


class HdparmReset(ResetStrategy):
    """Rewrites the drive's APM level with ``hdparm -B``.

    Forks a process on almost every check period and writes a device
    attribute instead of reading.
    """

    def __init__(
        self,
        device: Path,
        level: int,
        live: bool,
        runner: Callable[[str], None] = run_command,
    ) -> None:
        self.device = Path(device)
        self.level = level
        self.command = f"{HDPARM_PROG} -B {level} '{self.device}'"
        self.live = live
        self._runner = runner

    def reset(self) -> None:
        logger.debug(
            "Calling reset command%s: %s", "" if self.live else " (not really!)", self.command
        )
        if self.live:
            self._runner(self.command)


def build_reset_strategy(
    settings: MonitorSettings,
    runner: Callable[[str], None] = run_command,
) -> ResetStrategy:
    if settings.method is ResetMethod.HDPARM:
        return HdparmReset(
            settings.device, settings.apm_level, live=settings.live, runner=runner
        )
    return RandomReadReset(settings.device, live=settings.live)
