"""Configuration models and validation for the keep-alive monitor."""

from __future__ import annotations

import enum
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .errors import ConfigurationError
from .paths import DEFAULT_DEVICE, default_stats_path


CHECK_PERIOD = 4  # seconds; at most half of MIN_TIMEOUT
MIN_TIMEOUT = 8
DEFAULT_APM_LEVEL = 128
MIN_APM_LEVEL = 1
MAX_APM_LEVEL = 255
HDPARM_PROG = "/sbin/hdparm"


class ResetMethod(enum.IntEnum):
    RANDOM_READ = 1
    HDPARM = 2


@dataclass(frozen=True, slots=True)
class MonitorSettings:
    """Runtime configuration for the idle monitor, fixed after startup."""

    timeout: int
    device: Path = DEFAULT_DEVICE
    stats_path: Path = default_stats_path(DEFAULT_DEVICE)
    check_period: int = CHECK_PERIOD
    method: ResetMethod = ResetMethod.RANDOM_READ
    apm_level: int = DEFAULT_APM_LEVEL
    live: bool = False
    verbose: bool = True
    background: bool = False

    @classmethod
    def from_options(
        cls,
        timeout: Union[int, str],
        *,
        device: Path = DEFAULT_DEVICE,
        stats_path: Optional[Path] = None,
        method: Union[int, str] = ResetMethod.RANDOM_READ,
        apm_level: Union[int, str] = DEFAULT_APM_LEVEL,
        live: bool = False,
        verbose: bool = False,
        background: bool = False,
    ) -> "MonitorSettings":
        """Validate raw option values and build the settings.

        Numeric options may be given as strings straight from the command
        line. Checks run in a fixed order and the first failure raises
        :class:`ConfigurationError`.
        """
        timeout = parse_int(timeout, "timeout")
        validate_timeout(timeout)
        apm_level = parse_int(apm_level, "option -B")
        if not MIN_APM_LEVEL <= apm_level <= MAX_APM_LEVEL:
            raise ConfigurationError(
                f"option -B should be >={MIN_APM_LEVEL} and <={MAX_APM_LEVEL}"
            )
        try:
            reset_method = ResetMethod(parse_int(method, "method number"))
        except ValueError:
            raise ConfigurationError(f"invalid method number {method}") from None

        device = Path(device)
        stats_path = Path(stats_path) if stats_path is not None else default_stats_path(device)
        validate_paths(device, stats_path)

        return cls(
            timeout=timeout,
            device=device,
            stats_path=stats_path,
            method=reset_method,
            apm_level=apm_level,
            live=live,
            # Dry runs are only useful if they are observable.
            verbose=verbose or not live,
            background=background,
        )


def parse_int(value: Union[int, str], name: str) -> int:
    if isinstance(value, int):
        return value
    try:
        return int(value.strip())
    except ValueError:
        raise ConfigurationError(f"invalid {name} {value!r}") from None


def validate_timeout(timeout: int, check_period: int = CHECK_PERIOD) -> None:
    if timeout <= MIN_TIMEOUT or timeout % check_period:
        raise ConfigurationError(
            f"timeout should be above {MIN_TIMEOUT} and multiple of {check_period}"
        )


def validate_paths(device: Path, stats_path: Path) -> None:
    if not _has_mode(device, stat.S_ISBLK):
        raise ConfigurationError(f"harddisk device ({device}) is not a block device")
    if not _has_mode(stats_path, stat.S_ISREG):
        raise ConfigurationError(
            f"harddisk stats file ({stats_path}) is not a regular file"
        )


def _has_mode(path: Path, predicate) -> bool:
    try:
        return predicate(os.stat(path).st_mode)
    except OSError:
        return False
