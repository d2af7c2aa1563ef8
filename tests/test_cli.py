"""Test the disk-keepalive cli."""

import pathlib
from unittest import mock

import pytest
import pytest_mock
from typer import testing

from disk_keepalive import cli, errors, monitor, strategies


@pytest.fixture
def create_typer_cli_runner() -> testing.CliRunner:
    """Create a Typer CLI runner."""
    return testing.CliRunner()


@pytest.fixture
def mock_monitor(
    mocker: pytest_mock.MockerFixture, no_path_checks: None
) -> mock.MagicMock:
    """Skip filesystem checks and replace the monitor loop."""
    return mocker.patch.object(monitor, "IdleMonitor")


def test_help(create_typer_cli_runner: testing.CliRunner) -> None:
    """Test that -h prints usage and exits cleanly."""
    result = create_typer_cli_runner.invoke(cli.app, ["-h"])

    assert result.exit_code == 0
    assert "--timeout" in result.output
    assert "--apm-level" in result.output


def test_missing_timeout(
    create_typer_cli_runner: testing.CliRunner, mock_monitor: mock.MagicMock
) -> None:
    """Test that running without a timeout prints usage and fails."""
    result = create_typer_cli_runner.invoke(cli.app, [])

    assert result.exit_code == 1
    mock_monitor.assert_not_called()


@pytest.mark.parametrize(
    "args",
    [
        ["-t", "10"],
        ["-t", "8"],
        ["-t", "12", "-B", "0"],
        ["-t", "12", "-m", "3"],
        ["-t", "abc"],
        ["-t", "12", "-m", "x"],
        ["-t", "12", "-B", "max"],
    ],
)
def test_invalid_options(
    create_typer_cli_runner: testing.CliRunner,
    mock_monitor: mock.MagicMock,
    args: list,
) -> None:
    """Test that validation errors exit with status 1."""
    result = create_typer_cli_runner.invoke(cli.app, args)

    assert result.exit_code == 1
    mock_monitor.assert_not_called()


def test_non_numeric_timeout_message(
    create_typer_cli_runner: testing.CliRunner, mock_monitor: mock.MagicMock
) -> None:
    """Test that a non-numeric timeout is reported as a configuration error."""
    result = create_typer_cli_runner.invoke(cli.app, ["-t", "abc"])

    assert result.exit_code == 1
    assert "invalid timeout 'abc'" in result.output


def test_device_not_block(
    create_typer_cli_runner: testing.CliRunner, tmp_path: pathlib.Path
) -> None:
    """Test that the real path checks run without mocks."""
    result = create_typer_cli_runner.invoke(
        cli.app, ["-t", "12", "-d", str(tmp_path / "nope")]
    )

    assert result.exit_code == 1


def test_main_default(
    create_typer_cli_runner: testing.CliRunner, mock_monitor: mock.MagicMock
) -> None:
    """Test cli with only the timeout."""
    result = create_typer_cli_runner.invoke(cli.app, ["-t", "60"])

    assert result.exit_code == 0
    kwargs = mock_monitor.call_args.kwargs
    assert kwargs["stats_path"] == pathlib.Path("/sys/block/sda/stat")
    assert kwargs["timeout"] == 60
    assert kwargs["check_period"] == 4
    assert isinstance(kwargs["strategy"], strategies.RandomReadReset)
    assert kwargs["strategy"].live is False
    mock_monitor.return_value.run_forever.assert_called_once_with()


def test_main_with_options(
    create_typer_cli_runner: testing.CliRunner,
    mock_monitor: mock.MagicMock,
    tmp_path: pathlib.Path,
) -> None:
    """Test cli with the hdparm method and explicit paths."""
    stats_path = tmp_path / "stat"

    result = create_typer_cli_runner.invoke(
        cli.app,
        ["-t", "120", "-m", "2", "-B", "254", "-d", "/dev/sdb", "-f", str(stats_path), "-l"],
    )

    assert result.exit_code == 0
    kwargs = mock_monitor.call_args.kwargs
    assert kwargs["stats_path"] == stats_path
    strategy = kwargs["strategy"]
    assert isinstance(strategy, strategies.HdparmReset)
    assert strategy.command == "/sbin/hdparm -B 254 '/dev/sdb'"
    assert strategy.live is True


def test_missing_baseline(
    create_typer_cli_runner: testing.CliRunner, mock_monitor: mock.MagicMock
) -> None:
    """Test that an unreadable stats file at startup exits with status 1."""
    mock_monitor.return_value.run_forever.side_effect = errors.StatsUnavailable(
        "Could not get stats from file /sys/block/sda/stat"
    )

    result = create_typer_cli_runner.invoke(cli.app, ["-t", "12"])

    assert result.exit_code == 1


def test_background_parent_exits(
    mocker: pytest_mock.MockerFixture,
    create_typer_cli_runner: testing.CliRunner,
    mock_monitor: mock.MagicMock,
) -> None:
    """Test that the parent exits 0 after forking."""
    mocker.patch.object(cli, "daemonize", return_value=4242)

    result = create_typer_cli_runner.invoke(cli.app, ["-t", "12", "-b"])

    assert result.exit_code == 0
    mock_monitor.assert_not_called()


def test_background_child_runs(
    mocker: pytest_mock.MockerFixture,
    create_typer_cli_runner: testing.CliRunner,
    mock_monitor: mock.MagicMock,
) -> None:
    """Test that the forked child runs the monitor."""
    mocker.patch.object(cli, "daemonize", return_value=0)

    result = create_typer_cli_runner.invoke(cli.app, ["-t", "12", "-b"])

    assert result.exit_code == 0
    mock_monitor.return_value.run_forever.assert_called_once_with()


def test_fork_failure(
    mocker: pytest_mock.MockerFixture,
    create_typer_cli_runner: testing.CliRunner,
    mock_monitor: mock.MagicMock,
) -> None:
    """Test that a failed fork exits with status 1."""
    mocker.patch.object(cli, "daemonize", side_effect=errors.ForkFailure("fork() failed"))

    result = create_typer_cli_runner.invoke(cli.app, ["-t", "12", "-b"])

    assert result.exit_code == 1
    mock_monitor.assert_not_called()
