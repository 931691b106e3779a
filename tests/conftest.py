"""
Module: conftest.py
Description: Shared pytest fixtures for slack_webhook tests.

Provides a fake requests session that replays prepared responses, a fast
webhook configuration and a loguru sink for asserting on log output.
"""

import pytest
import requests
from loguru import logger

from slack_webhook import SlackWebhook, WebhookConfig

WEBHOOK_URL = "https://hooks.slack.test/services/T000/B000/XXXX"


def make_response(status_code, headers=None):
    """Build a real requests.Response with the given status and headers."""
    resp = requests.Response()
    resp.status_code = status_code
    resp.headers.update(headers or {})
    resp._content = b""
    resp.url = WEBHOOK_URL
    return resp


class FakeSession:
    """
    Stand-in for requests.Session.

    Replays the given items in order; the last one repeats forever. An
    exception instance is raised instead of returned.
    """

    def __init__(self, items):
        self.items = list(items)
        self.calls = []
        self.headers = {}
        self.closed = False

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        item = self.items.pop(0) if len(self.items) > 1 else self.items[0]
        if isinstance(item, Exception):
            raise item
        return item

    def close(self):
        self.closed = True


@pytest.fixture
def fast_config():
    """Small intervals so retry loops finish in milliseconds."""
    return WebhookConfig(
        debug=True,
        ticker_interval_seconds=0.05,
        retry_interval_seconds=0.01,
        min_retry_interval_seconds=0.0,
        max_retry_interval_seconds=0.05,
        retry_interval_increment_seconds=0.005,
        retry_interval_decrement_seconds=0.001,
    )


@pytest.fixture
def make_webhook(fast_config):
    """Factory building a SlackWebhook around a FakeSession; stops tickers afterwards."""
    created = []

    def _make(*items, config=None):
        session = FakeSession(items or [make_response(200)])
        hook = SlackWebhook(config or fast_config, session=session)
        created.append(hook)
        return hook, session

    yield _make

    for hook in created:
        hook.stop()


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during the test."""
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
