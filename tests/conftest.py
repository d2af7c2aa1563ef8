"""Fixtures used by pytest."""

import pathlib
from typing import Callable

import pytest
import pytest_mock

from disk_keepalive import config


@pytest.fixture
def stats_file(tmp_path: pathlib.Path) -> pathlib.Path:
    """Location of a fake sysfs stat file."""
    return tmp_path / "stat"


@pytest.fixture
def write_stats(stats_file: pathlib.Path) -> Callable[[int, int], pathlib.Path]:
    """Write a sysfs style stat line with the given sector counters."""

    def _write(sectors_read: int, sectors_written: int) -> pathlib.Path:
        stats_file.write_text(
            f"   18453     5210  {sectors_read}   92731    40210    31833  "
            f"{sectors_written}  601120        0   291804   693851\n"
        )
        return stats_file

    return _write


@pytest.fixture
def no_path_checks(mocker: pytest_mock.MockerFixture) -> None:
    """Skip the block device and stats file type checks."""
    mocker.patch.object(config, "validate_paths")
