"""
Periodic reporting of the status code tally.

A StatusTicker owns one daemon thread that wakes every interval, drains the
tally and hands the counts to a report callback (logging by default).
"""

from __future__ import annotations

import threading
import typing as t
from enum import Enum

from loguru import logger

from slack_webhook.statusTally import StatusTally


class TickerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


def log_status_codes(counts: dict[int, int]) -> None:
    logger.info(f"Slack HTTP response codes = {counts}")


class StatusTicker:
    """
    Start/stop lifecycle for the background reporter.

    - start() only has an effect from IDLE, so a second call is a no-op.
    - stop() from IDLE or STOPPED is a no-op.
    - The state check in start() happens under the tally lock.
    """

    def __init__(
        self,
        tally: StatusTally,
        interval_seconds: float,
        report: t.Callable[[dict[int, int]], None] = log_status_codes,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.tally = tally
        self.interval_seconds = interval_seconds
        self._report = report
        self._state = TickerState.IDLE
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def state(self) -> TickerState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is TickerState.RUNNING

    def start(self) -> bool:
        """Start the reporter thread. Returns False if it was not IDLE."""
        with self.tally.lock:
            if self._state is not TickerState.IDLE:
                return False
            logger.info(f"Initialising status code ticker ({self.interval_seconds}s)")
            self._thread = threading.Thread(
                target=self._run, name="slack-webhook-status-ticker", daemon=True
            )
            self._state = TickerState.RUNNING
            self._thread.start()
            return True

    def stop(self, timeout: float | None = None) -> bool:
        """
        Signal the reporter thread to exit and wait for it.

        Returns:
            False when the ticker was not running
        """
        with self.tally.lock:
            if self._state is not TickerState.RUNNING:
                return False
            self._state = TickerState.STOPPED
            thread = self._thread
        logger.info(f"Stopping status code ticker ({self.interval_seconds}s)")
        self._stop_event.set()
        # Joined outside the lock: a tick in progress needs it to drain
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        return True

    def tick(self) -> dict[int, int]:
        """Drain the tally and report it once."""
        counts = self.tally.drain()
        self._report(counts)
        return counts

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval_seconds):
            try:
                self.tick()
            except Exception as e:
                logger.exception(f"Status code report failed: {e}")
        logger.info(f"Exiting status code ticker ({self.interval_seconds}s)")
