"""Helpers to detach the monitor from the controlling terminal."""

from __future__ import annotations

import logging
import os

from .errors import ForkFailure

logger = logging.getLogger(__name__)


def daemonize() -> int:
    """Fork once and start a new session in the child.

    Returns the child's pid in the parent and 0 in the child.
    """
    logger.debug("Forking and going to background")
    try:
        pid = os.fork()
    except OSError as exc:
        raise ForkFailure(f"fork() failed: {exc}") from exc
    if pid:
        logger.debug("Parent exiting. Child process %d continues", pid)
        return pid
    os.setsid()
    return 0
