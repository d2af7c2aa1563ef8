"""Idle tracking loop that drives the keep-alive resets."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

from .config import CHECK_PERIOD
from .errors import StatsUnavailable
from .models import ActivityCounters, MonitorState
from .stats import read_counters
from .strategies import ResetStrategy

logger = logging.getLogger(__name__)


class IdleMonitor:
    """Samples the disk counters every check period and bridges short idle gaps."""

    def __init__(
        self,
        stats_path: Path,
        strategy: ResetStrategy,
        timeout: int,
        check_period: int = CHECK_PERIOD,
    ) -> None:
        self.stats_path = Path(stats_path)
        self.strategy = strategy
        self.timeout = timeout
        self.check_period = check_period
        self._state: Optional[MonitorState] = None

    @property
    def state(self) -> MonitorState:
        if self._state is None:
            raise RuntimeError("Monitor has no baseline; call start() first.")
        return self._state

    def start(self) -> None:
        """Take the baseline snapshot. Raises StatsUnavailable if there is none."""
        self._state = MonitorState(baseline=read_counters(self.stats_path))

    def run_forever(self) -> None:
        stop_event = threading.Event()
        try:
            self.run_until_stopped(stop_event)
        except KeyboardInterrupt:
            logger.info("Monitor interrupted.")

    def run_until_stopped(self, stop_event: threading.Event) -> None:
        """Run the monitor until the provided event is set."""
        self.start()
        logger.info("Watching %s every %d seconds", self.stats_path, self.check_period)
        try:
            while not stop_event.wait(self.check_period):
                self.poll_once()
        finally:
            self.strategy.close()
            logger.info("Monitor stopped.")

    def poll_once(self) -> None:
        state = self.state
        counters = self._sample()
        if counters is None:
            return

        if counters.differs_from(state.baseline):
            state.mark_active(counters)
            return

        state.idle_seconds += self.check_period
        if not state.parking_allowed:
            logger.debug("No activity from %d seconds", state.idle_seconds)

        if state.idle_seconds < self.timeout:
            self.strategy.reset()
            if self.strategy.perturbs_read_counter:
                after = self._sample()
                if after is not None:
                    state.baseline = after
        elif not state.parking_allowed:
            state.parking_allowed = True
            logger.debug("Inactivity timeout reached, parking allowed")

    def _sample(self) -> Optional[ActivityCounters]:
        try:
            return read_counters(self.stats_path)
        except StatsUnavailable as exc:
            logger.warning("%s", exc)
            return None
