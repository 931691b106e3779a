"""
Module: test_backoff.py
Description: Unit tests for BackoffState growth and shrink rules.
"""

import threading

import pytest

from slack_webhook import BackoffState, WebhookConfig


class TestBackoffState:
    """Test cases for the shared pacing interval."""

    def test_grow_without_retry_after_caps_at_maximum(self):
        """Test growth with no hint stops at the ceiling."""
        backoff = BackoffState(3.95, maximum=4.0, increment=0.1)
        assert backoff.grow() == pytest.approx(4.0)
        assert backoff.grow() == pytest.approx(4.0)

    def test_grow_limited_by_retry_after(self):
        """Test the hint bounds growth from above."""
        backoff = BackoffState(1.0, increment=0.5)
        assert backoff.grow(1) == pytest.approx(1.0)
        assert backoff.grow(10) == pytest.approx(1.5)

    def test_retry_after_never_exceeds_maximum(self):
        """Test the ceiling also holds when Retry-After is larger."""
        backoff = BackoffState(3.9, maximum=4.0, increment=1.0)
        assert backoff.grow(60) == pytest.approx(4.0)

    def test_negative_retry_after_floors_at_minimum(self):
        """Test a signed header value cannot push the interval below the floor."""
        backoff = BackoffState(0.5, minimum=0.1)
        assert backoff.grow(-5) == pytest.approx(0.1)

    def test_shrink_floors_at_minimum(self):
        """Test decrement never crosses the floor."""
        backoff = BackoffState(0.0015, decrement=0.001)
        assert backoff.shrink() == pytest.approx(0.0005)
        assert backoff.shrink() == 0.0

    def test_initial_clamped_into_bounds(self):
        """Test an out-of-range initial value is pulled inside the bounds."""
        assert BackoffState(10.0, maximum=4.0).interval == 4.0

    def test_invalid_bounds(self):
        """Test inverted bounds are rejected."""
        with pytest.raises(ValueError):
            BackoffState(1.0, minimum=5.0, maximum=4.0)

    def test_from_config(self):
        """Test tunables are taken from WebhookConfig."""
        config = WebhookConfig(
            retry_interval_seconds=0.2,
            retry_interval_increment_seconds=0.3,
            retry_interval_decrement_seconds=0.01,
        )
        backoff = BackoffState.from_config(config)
        assert backoff.interval == 0.2
        assert backoff.describe() == {
            "retry_interval": 0.2,
            "retry_interval_increment": 0.3,
            "retry_interval_decrement": 0.01,
        }

    def test_concurrent_updates_stay_in_bounds(self):
        """Test interleaved grow/shrink from many threads keeps the invariant."""
        backoff = BackoffState(0.1, maximum=4.0, increment=0.1, decrement=0.001)

        def worker(n):
            for i in range(500):
                if (i + n) % 3 == 0:
                    backoff.grow()
                else:
                    backoff.shrink()

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(6)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert 0.0 <= backoff.interval <= 4.0
