import os
from dataclasses import dataclass, field

DEBUG_ENV_VAR = "SLACK_WEBHOOK_DEBUG"
TICKER_INTERVAL_ENV_VAR = "SLACK_WEBHOOK_TICKER_INTERVAL"


@dataclass(frozen=True)
class WebhookConfig:
    debug: bool = False                              # status code telemetry on/off
    ticker_interval_seconds: float = 3600.0          # how often the status tally is reported
    retry_interval_seconds: float = 0.1              # initial pause between sends
    min_retry_interval_seconds: float = 0.0
    max_retry_interval_seconds: float = 4.0          # ceiling, also used when Retry-After is absent
    retry_interval_increment_seconds: float = 0.1    # growth on 429
    retry_interval_decrement_seconds: float = 0.001  # shrink on success
    timeout_seconds: float = 10.0                    # per-request timeout
    allow_redirects: bool = True                     # False: a 3xx means a bad webhook token
    session_headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.ticker_interval_seconds <= 0:
            raise ValueError("ticker_interval_seconds must be positive")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        for name in (
            "retry_interval_seconds",
            "min_retry_interval_seconds",
            "max_retry_interval_seconds",
            "retry_interval_increment_seconds",
            "retry_interval_decrement_seconds",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.min_retry_interval_seconds > self.max_retry_interval_seconds:
            raise ValueError("min_retry_interval_seconds must not exceed max_retry_interval_seconds")

    @classmethod
    def from_env(cls, **overrides) -> "WebhookConfig":
        """
        Build a config from SLACK_WEBHOOK_DEBUG and SLACK_WEBHOOK_TICKER_INTERVAL.

        Any non-empty SLACK_WEBHOOK_DEBUG enables telemetry. Keyword overrides win.
        """
        values: dict = {"debug": bool(os.getenv(DEBUG_ENV_VAR))}
        interval = os.getenv(TICKER_INTERVAL_ENV_VAR)
        if interval:
            try:
                values["ticker_interval_seconds"] = float(interval)
            except ValueError as e:
                raise ValueError(f"{TICKER_INTERVAL_ENV_VAR} must be a number of seconds, got {interval!r}") from e
        values.update(overrides)
        return cls(**values)
