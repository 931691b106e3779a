from __future__ import annotations

import threading


class StatusTally:
    """
    Thread-safe count of HTTP status codes seen since the last report.

    Draining zeroes the counts but keeps every code seen so far, so reports
    list the same keys from one interval to the next.
    """

    def __init__(self) -> None:
        # Also guards the ticker lifecycle (see StatusTicker)
        self.lock = threading.Lock()
        self._counts: dict[int, int] = {}

    def increment(self, code: int) -> None:
        with self.lock:
            self._counts[code] = self._counts.get(code, 0) + 1

    def snapshot(self) -> dict[int, int]:
        with self.lock:
            return dict(self._counts)

    def drain(self) -> dict[int, int]:
        """Return the current counts and reset all of them to zero."""
        with self.lock:
            counts = dict(self._counts)
            for code in self._counts:
                self._counts[code] = 0
            return counts
