#!/usr/bin/env python3
"""
Manual smoke test for slack_webhook against a real incoming webhook.

Before running:
1. Set environment variables:
   export SLACK_WEBHOOK_URL="https://hooks.slack.com/services/..."
   export SLACK_WEBHOOK_DEBUG=1          # optional, turns on status code reports

2. Or pass them directly to the script:
   python send_test_message.py --webhook-url URL --count 20 --ticker-interval 5
"""

import argparse
import os
import sys
import time
import traceback

from loguru import logger

from slack_webhook import Action, Attachment, Field, Payload, SlackWebhook, WebhookConfig


def main():
    parser = argparse.ArgumentParser(description='Send test messages to a Slack incoming webhook')
    parser.add_argument('--webhook-url', help='Webhook URL (or set SLACK_WEBHOOK_URL env var)')
    parser.add_argument('--proxy', help='Proxy URL to route requests through', default=None)
    parser.add_argument('--count', type=int, default=1, help='Number of plain messages to send')
    parser.add_argument('--ticker-interval', type=float, default=None,
                        help='Seconds between status code reports (implies telemetry on)')
    args = parser.parse_args()

    webhook_url = args.webhook_url or os.getenv("SLACK_WEBHOOK_URL")
    if not webhook_url:
        logger.error("❌ Missing webhook URL. Set SLACK_WEBHOOK_URL or pass --webhook-url")
        sys.exit(1)

    overrides = {}
    if args.ticker_interval:
        overrides = {"debug": True, "ticker_interval_seconds": args.ticker_interval}

    try:
        config = WebhookConfig.from_env(**overrides)
        with SlackWebhook(config) as hook:
            # Test 1: plain text burst, exercises pacing
            logger.info(f"📤 Sending {args.count} plain message(s)...")
            failures = 0
            for i in range(args.count):
                errors = hook.send(webhook_url, Payload(text=f"🚀 slack_webhook test message {i + 1}/{args.count}"),
                                   proxy=args.proxy)
                if errors:
                    failures += 1
                    logger.warning(f"⚠️  Message {i + 1} failed: {errors[0]}")
            logger.info(f"✅ Plain messages done ({failures} failed), retry interval {hook.backoff.interval:.3f}s")

            # Test 2: attachment with fields and actions
            logger.info("📤 Sending attachment message...")
            attachment = Attachment(
                fallback="Build #42 passed",
                color="good",
                title="Build #42",
                title_link="https://example.com/builds/42",
                footer="slack_webhook",
                ts=int(time.time()),
            )
            attachment.add_field(Field("Branch", "main", short=True)).add_field(Field("Duration", "3m 12s", short=True))
            attachment.add_action(Action("button", "Open build", "https://example.com/builds/42", "primary"))
            errors = hook.send(webhook_url, Payload(text="Attachment test", attachments=[attachment]),
                               proxy=args.proxy)
            if errors:
                logger.error(f"❌ Attachment message failed: {errors[0]}")
                sys.exit(1)
            logger.info("✅ Attachment message sent!")

            if config.debug:
                # Give the ticker a chance to report at least once
                time.sleep(config.ticker_interval_seconds * 1.5)

        logger.info("\n🎉 All messages sent!")

    except ValueError as e:
        logger.error(f"❌ Configuration error: {e}")
        sys.exit(1)

    except Exception as e:
        logger.error(f"❌ Unexpected error occurred: {e}")
        logger.error(f"Error type: {type(e).__name__}")
        logger.debug(traceback.format_exc())
        sys.exit(1)


if __name__ == "__main__":
    main()
