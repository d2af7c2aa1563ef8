"""Command-line interface for the disk keep-alive monitor."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from .config import (
    CHECK_PERIOD,
    DEFAULT_APM_LEVEL,
    HDPARM_PROG,
    MIN_TIMEOUT,
    MonitorSettings,
    ResetMethod,
)
from .daemon import daemonize
from .errors import ConfigurationError, ForkFailure, StatsUnavailable
from .paths import DEFAULT_DEVICE

logger = logging.getLogger(__name__)

EPILOG = (
    "Requires sysfs. Test without --live first; once it behaves, start it "
    "from your init system with --live --background."
)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

app = typer.Typer(
    help="Stop hard drives from parking their heads during short idle gaps.",
    context_settings=CONTEXT_SETTINGS,
    add_completion=False,
)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@app.command(epilog=EPILOG, context_settings=CONTEXT_SETTINGS)
def main(
    ctx: typer.Context,
    timeout: Optional[str] = typer.Option(
        None,
        "--timeout",
        "-t",
        help=(
            f"Inactivity period in seconds after which the disk may park its heads "
            f"(above {MIN_TIMEOUT} and multiple of {CHECK_PERIOD})."
        ),
    ),
    apm_level: str = typer.Option(
        str(DEFAULT_APM_LEVEL),
        "--apm-level",
        "-B",
        help=f"Value for the '-B' parameter of {HDPARM_PROG}.",
    ),
    device: Path = typer.Option(
        DEFAULT_DEVICE, "--device", "-d", path_type=Path, help="Hard disk device."
    ),
    stats_file: Optional[Path] = typer.Option(
        None,
        "--stats-file",
        "-f",
        path_type=Path,
        help="sysfs stats file of the device (defaults to /sys/block/<device>/stat).",
    ),
    live: bool = typer.Option(
        False, "--live", "-l", help="Really reset the timer; otherwise only log."
    ),
    method: str = typer.Option(
        str(int(ResetMethod.RANDOM_READ)),
        "--method",
        "-m",
        help=(
            f"Timer reset method: {ResetMethod.RANDOM_READ:d} = random read from disk "
            f"(read only, head moves often), {ResetMethod.HDPARM:d} = hdparm -B "
            "(writes a disk attribute often)."
        ),
    ),
    background: bool = typer.Option(
        False, "--background", "-b", help="Fork and go into background mode."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Verbose logs (always on without --live)."
    ),
) -> None:
    """Watch disk activity and reset the idle timer until the timeout is reached."""
    if timeout is None:
        typer.echo(ctx.get_help(), err=True)
        raise typer.Exit(code=1)

    try:
        settings = MonitorSettings.from_options(
            timeout,
            device=device,
            stats_path=stats_file,
            method=method,
            apm_level=apm_level,
            live=live,
            verbose=verbose,
            background=background,
        )
    except ConfigurationError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)

    configure_logging(settings.verbose)
    logger.debug(
        "Timeout=%d, OptB=%d, Livemode=%s, Background=%s",
        settings.timeout,
        settings.apm_level,
        settings.live,
        settings.background,
    )
    logger.debug(
        "Method=%d, HD Device=%s, HD stats file=%s",
        settings.method,
        settings.device,
        settings.stats_path,
    )

    if settings.background:
        try:
            if daemonize():
                raise typer.Exit(code=0)
        except ForkFailure as exc:
            logger.error("%s ... exiting", exc)
            raise typer.Exit(code=1)

    run_monitor(settings)


def run_monitor(settings: MonitorSettings) -> None:
    from .monitor import IdleMonitor
    from .strategies import HdparmReset, build_reset_strategy

    strategy = build_reset_strategy(settings)
    if isinstance(strategy, HdparmReset):
        logger.debug("Reset command: %s", strategy.command)

    monitor = IdleMonitor(
        stats_path=settings.stats_path,
        strategy=strategy,
        timeout=settings.timeout,
        check_period=settings.check_period,
    )
    try:
        monitor.run_forever()
    except StatsUnavailable as exc:
        logger.error("No initial stats baseline: %s", exc)
        raise typer.Exit(code=1)
