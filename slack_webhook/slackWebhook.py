"""
slackWebhook.py

Environment variables (optional):
  SLACK_WEBHOOK_DEBUG            -> any non-empty value turns on status code telemetry
  SLACK_WEBHOOK_TICKER_INTERVAL  -> seconds between telemetry reports (default 3600)

Basic usage:
  from slack_webhook import SlackWebhook, Payload
  hook = SlackWebhook()
  errors = hook.send("https://hooks.slack.com/services/T000/B000/XXXX", Payload(text="Deploy done ✅"))
  if errors:
      print(errors[0])

Advanced:
  hook.send(url, payload, proxy="http://proxy.internal:3128")   # route this call through a proxy
  hook.send(url, payload, deadline=30)                          # give up after 30s of rate limiting
  hook.send(url, payload, cancel_event=shutdown_event)          # abort from another thread

send() never raises for delivery problems: it returns a list that is empty on
success and holds exactly one WebhookError otherwise.
"""

from __future__ import annotations

import re
import threading
import time
import typing as t

import requests
from loguru import logger
from urllib3.exceptions import LocationParseError
from urllib3.util import parse_url

from slack_webhook.backoff import BackoffState
from slack_webhook.statusTally import StatusTally
from slack_webhook.statusTicker import StatusTicker
from slack_webhook.webhookConfig import WebhookConfig
from slack_webhook.webhookPayload import Payload

JSON_HEADERS = {"Content-Type": "application/json"}

# Up to 18 digits always fits a signed 64-bit integer
_RETRY_AFTER_RE = re.compile(r"[+-]?\d{1,18}")


class SlackWebhook:
    """
    Incoming webhook sender with adaptive pacing.

    - Every send sleeps for the shared retry interval after each response.
    - 429 grows the interval (bounded by Retry-After and the configured max) and retries.
    - Any other status >= 400 is returned as an error without retrying.
    - With config.debug on, status codes are counted and reported periodically.
    """

    def __init__(
        self,
        config: WebhookConfig | None = None,
        *,
        session: requests.Session | None = None,
        backoff: BackoffState | None = None,
        tally: StatusTally | None = None,
    ) -> None:
        self._cfg = config or WebhookConfig.from_env()
        self._session = session or requests.Session()
        if self._cfg.session_headers:
            self._session.headers.update(self._cfg.session_headers)
        self.backoff = backoff or BackoffState.from_config(self._cfg)
        self.tally = tally or StatusTally()
        self.ticker = StatusTicker(
            self.tally,
            self._cfg.ticker_interval_seconds,
            report=self._report_status_codes,
        )

    @property
    def config(self) -> WebhookConfig:
        return self._cfg

    # ----------------------------- Public API -----------------------------

    def send(
        self,
        webhook_url: str,
        payload: Payload,
        *,
        proxy: str | None = None,
        deadline: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> list[WebhookError]:
        """
        Deliver one message, retrying while the endpoint answers 429.

        Args:
            webhook_url: Incoming webhook URL (the URL is the credential)
            payload: Message to send
            proxy: Proxy URL for this call only; None or "" sends directly
            deadline: Seconds after which rate-limit retries stop; None waits forever
            cancel_event: Setting it interrupts the pacing sleep and aborts the send

        Returns:
            [] on success, otherwise a one-element list with the WebhookError
        """
        if not webhook_url:
            return self._fail(TransportError("Error sending msg: webhook_url is empty"))

        try:
            body = payload.to_json()
        except (TypeError, ValueError, OverflowError) as e:
            return self._fail(SerializationError(f"Error serializing payload: {e}"), cause=e)

        proxies = None
        if proxy:
            try:
                proxies = _proxy_map(proxy)
            except ProxyConfigurationError as e:
                return self._fail(e)

        deadline_at = None if deadline is None else time.monotonic() + deadline
        attempt = 0
        while True:
            attempt += 1
            logger.debug(f"Posting webhook message (attempt {attempt})")
            try:
                resp = self._session.post(
                    webhook_url,
                    data=body,
                    headers=JSON_HEADERS,
                    proxies=proxies,
                    timeout=self._cfg.timeout_seconds,
                    allow_redirects=self._cfg.allow_redirects,
                )
            except requests.RequestException as e:
                return self._fail(TransportError(f"Error sending msg: {e}"), cause=e)

            status = resp.status_code
            if self._cfg.debug:
                self.tally.increment(status)

            # We always sleep between messages, but adapt the rate
            if self._pause(self.backoff.interval, cancel_event, deadline_at):
                return self._fail(DeliveryCancelled(f"Send cancelled after {attempt} attempt(s)"))

            if status == requests.codes.too_many_requests:
                header = resp.headers.get("Retry-After")
                retry_after = None
                if header:
                    retry_after = _parse_retry_after(header)
                    if retry_after is None:
                        return self._fail(RetryAfterParseError(header))
                interval = self.backoff.grow(retry_after)
                logger.warning(f"Rate limited (429), retry interval now {interval:.3f}s")
                if deadline_at is not None and time.monotonic() >= deadline_at:
                    return self._fail(DeadlineExceeded(f"Deadline of {deadline}s exceeded after {attempt} attempt(s)"))
                continue

            if 300 <= status < 400 and not self._cfg.allow_redirects:
                return self._fail(RedirectRejected(status))

            if status >= 400:
                return self._fail(DeliveryRejected(status))

            interval = self.backoff.shrink()
            logger.debug(f"Message delivered ({status}), retry interval now {interval:.3f}s")
            return []

    def start(self) -> bool:
        """Start periodic status code reporting if telemetry is enabled."""
        if not self._cfg.debug:
            return False
        return self.ticker.start()

    def stop(self) -> bool:
        """Stop periodic reporting. Safe to call when it never started."""
        return self.ticker.stop()

    def close(self) -> None:
        self.stop()
        self._session.close()

    def __enter__(self) -> "SlackWebhook":
        """Context manager support; starts telemetry reporting."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Stop reporting and close the session."""
        self.close()

    # --------------------------- Internal helpers -------------------------

    def _pause(
        self,
        seconds: float,
        cancel_event: threading.Event | None,
        deadline_at: float | None,
    ) -> bool:
        """Sleep for the pacing interval. Returns True if cancelled."""
        if deadline_at is not None:
            seconds = min(seconds, max(0.0, deadline_at - time.monotonic()))
        if cancel_event is None:
            time.sleep(seconds)
            return False
        return cancel_event.wait(seconds)

    def _fail(self, error: "WebhookError", cause: BaseException | None = None) -> list["WebhookError"]:
        if cause is not None:
            error.__cause__ = cause
        logger.error(f"Webhook delivery failed: {error}")
        return [error]

    def _report_status_codes(self, counts: dict[int, int]) -> None:
        params = self.backoff.describe()
        logger.info(
            f"Slack HTTP response codes = {counts} "
            f"(ticker_interval={self._cfg.ticker_interval_seconds}s, "
            f"retry_interval={params['retry_interval']:.3f}s, "
            f"retry_interval_increment={params['retry_interval_increment']}s, "
            f"retry_interval_decrement={params['retry_interval_decrement']}s)"
        )


def _parse_retry_after(header: str) -> int | None:
    if not _RETRY_AFTER_RE.fullmatch(header):
        return None
    return int(header)


def _proxy_map(proxy: str) -> dict[str, str]:
    try:
        parsed = parse_url(proxy)
    except LocationParseError as e:
        raise ProxyConfigurationError(f"Invalid proxy URL: {proxy}") from e
    if not parsed.host:
        raise ProxyConfigurationError(f"Invalid proxy URL (no host): {proxy}")
    return {"http": proxy, "https": proxy}


# ------------------------------ Exceptions -------------------------------

class WebhookError(Exception):
    """Base class for delivery failures returned by send()."""


class SerializationError(WebhookError):
    """The payload could not be encoded as JSON."""


class ProxyConfigurationError(WebhookError):
    """The proxy URL could not be used."""


class TransportError(WebhookError):
    """Network level failure (DNS, refused connection, timeout). Not retried."""


class RetryAfterParseError(WebhookError):
    def __init__(self, header: str) -> None:
        super().__init__(f"Error parsing Retry-After header: {header}")
        self.header = header


class DeliveryRejected(WebhookError):
    def __init__(self, status_code: int, message: str | None = None) -> None:
        super().__init__(message or f"Error sending msg. Status: {status_code}")
        self.status_code = status_code


class RedirectRejected(DeliveryRejected):
    """The webhook answered with a redirect, which means the token is wrong."""

    def __init__(self, status_code: int) -> None:
        super().__init__(status_code, f"Incorrect token (redirection). Status: {status_code}")


class DeliveryCancelled(WebhookError):
    """The cancel event was set while waiting between attempts."""


class DeadlineExceeded(WebhookError):
    """Rate limiting outlasted the deadline passed to send()."""


# ------------------------------ Utility functions -------------------------------

_default_webhook: SlackWebhook | None = None
_default_lock = threading.Lock()


def get_default_webhook() -> SlackWebhook:
    """Process-wide sender built from environment variables, created on first use."""
    global _default_webhook
    with _default_lock:
        if _default_webhook is None:
            _default_webhook = SlackWebhook()
        return _default_webhook


def send(webhook_url: str, payload: Payload, **kwargs: t.Any) -> list[WebhookError]:
    """Send through the process-wide sender, sharing its backoff and tally."""
    return get_default_webhook().send(webhook_url, payload, **kwargs)


def start() -> bool:
    return get_default_webhook().start()


def stop() -> bool:
    return get_default_webhook().stop()
