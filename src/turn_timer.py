"""
PVCGL Engine - Turn Timer

Background countdown that calls back once per interval until cancelled.
The session owns at most one; replacing the live state cancels the old one.

Usage:
    timer = TurnTimer(session.tick, interval=1.0)
    timer.start()
    ...
    timer.cancel()
"""

import logging
import threading
from typing import Callable, Optional


logger = logging.getLogger(__name__)


class TurnTimer:
    """
    Periodic ticker running on a daemon thread.

    Attributes:
        interval: Seconds between ticks
        ticks: Number of callbacks fired so far
    """

    def __init__(self, on_tick: Callable[[], object], interval: float = 1.0):
        if interval <= 0:
            raise ValueError("Timer interval must be positive")
        self.on_tick = on_tick
        self.interval = interval
        self.ticks = 0
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._run, name="turn-timer", daemon=True)

    def start(self) -> None:
        if self._thread.is_alive() or self._stopped.is_set():
            raise RuntimeError("TurnTimer can only be started once")
        self._thread.start()
        logger.debug(f"Turn timer started ({self.interval}s interval)")

    def cancel(self) -> None:
        """Stop ticking. Safe to call more than once and from the tick callback."""
        self._stopped.set()
        logger.debug(f"Turn timer cancelled after {self.ticks} ticks")

    def join(self, timeout: Optional[float] = None) -> None:
        if threading.current_thread() is not self._thread:
            self._thread.join(timeout)

    @property
    def running(self) -> bool:
        return self._thread.is_alive() and not self._stopped.is_set()

    def _run(self) -> None:
        # wait() returns True once cancelled
        while not self._stopped.wait(self.interval):
            self.ticks += 1
            self.on_tick()
