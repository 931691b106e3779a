"""
Slack Webhook - resilient incoming webhook sender for Python.

A small Slack incoming webhook client with:
- Attachment, field and action builders
- Adaptive pacing shared across senders, driven by 429 / Retry-After
- Optional status code telemetry reported on a timer
- Cancellable sends with an optional deadline

Basic usage:
    from slack_webhook import SlackWebhook, Payload

    hook = SlackWebhook()  # reads SLACK_WEBHOOK_DEBUG from env
    errors = hook.send(webhook_url, Payload(text="Hello from Python! 🚀"))
"""

__version__ = "0.1.0"

from .webhookPayload import Action, Attachment, Field, Payload
from .webhookConfig import WebhookConfig
from .backoff import BackoffState
from .statusTally import StatusTally
from .statusTicker import StatusTicker, TickerState
from .slackWebhook import (
    DeadlineExceeded,
    DeliveryCancelled,
    DeliveryRejected,
    ProxyConfigurationError,
    RedirectRejected,
    RetryAfterParseError,
    SerializationError,
    SlackWebhook,
    TransportError,
    WebhookError,
    get_default_webhook,
    send,
    start,
    stop,
)

__all__ = [
    "SlackWebhook",
    "WebhookConfig",
    "Payload",
    "Attachment",
    "Field",
    "Action",
    "BackoffState",
    "StatusTally",
    "StatusTicker",
    "TickerState",
    "WebhookError",
    "SerializationError",
    "ProxyConfigurationError",
    "TransportError",
    "RetryAfterParseError",
    "DeliveryRejected",
    "RedirectRejected",
    "DeliveryCancelled",
    "DeadlineExceeded",
    "get_default_webhook",
    "send",
    "start",
    "stop",
    "__version__",
]
