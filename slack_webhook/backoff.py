"""
Shared pacing interval for webhook sends.

One interval is shared by every send that uses the same BackoffState, because
the upstream rate limit is one budget. It grows on 429 and shrinks on success.
"""

from __future__ import annotations

import threading
import typing as t

if t.TYPE_CHECKING:
    from slack_webhook.webhookConfig import WebhookConfig


class BackoffState:
    """Adaptive, lock-protected retry interval (seconds)."""

    def __init__(
        self,
        initial: float = 0.1,
        *,
        minimum: float = 0.0,
        maximum: float = 4.0,
        increment: float = 0.1,
        decrement: float = 0.001,
    ) -> None:
        if minimum < 0 or minimum > maximum:
            raise ValueError("Backoff bounds must satisfy 0 <= minimum <= maximum")
        self.minimum = minimum
        self.maximum = maximum
        self.increment = increment
        self.decrement = decrement
        self._interval = min(max(initial, minimum), maximum)
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: "WebhookConfig") -> "BackoffState":
        return cls(
            config.retry_interval_seconds,
            minimum=config.min_retry_interval_seconds,
            maximum=config.max_retry_interval_seconds,
            increment=config.retry_interval_increment_seconds,
            decrement=config.retry_interval_decrement_seconds,
        )

    @property
    def interval(self) -> float:
        with self._lock:
            return self._interval

    def grow(self, retry_after: float | None = None) -> float:
        """
        Step the interval up after a 429.

        The new value is min(retry_after, current + increment), or
        min(maximum, current + increment) without a Retry-After hint, and is
        always kept inside [minimum, maximum].

        Returns:
            The new interval
        """
        with self._lock:
            target = self.maximum if retry_after is None else retry_after
            grown = min(target, self._interval + self.increment, self.maximum)
            self._interval = max(self.minimum, grown)
            return self._interval

    def shrink(self) -> float:
        """Step the interval down after a success, floored at minimum."""
        with self._lock:
            self._interval = max(self.minimum, self._interval - self.decrement)
            return self._interval

    def describe(self) -> dict[str, float]:
        with self._lock:
            return {
                "retry_interval": self._interval,
                "retry_interval_increment": self.increment,
                "retry_interval_decrement": self.decrement,
            }
