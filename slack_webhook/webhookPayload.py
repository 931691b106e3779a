"""
webhookPayload.py

Message payload for Slack incoming webhooks.

Wire format rules:
  - Payload scalars are left out of the JSON when empty/False.
  - Attachment optionals are always present and serialize as null when unset.
  - Fields and actions keep the order they were added in.

Basic usage:
  attachment = Attachment(title="Build #42", color="good")
  attachment.add_field(Field("Branch", "main", short=True)).add_action(
      Action("button", "Open", "https://ci.example.com/42", "primary")
  )
  payload = Payload(text="Build finished", attachments=[attachment])
  payload.to_json()
"""

from __future__ import annotations

import json
import typing as t
from dataclasses import dataclass, field


@dataclass
class Field:
    title: str
    value: str
    short: bool = False

    def to_dict(self) -> dict[str, t.Any]:
        return {"title": self.title, "value": self.value, "short": self.short}


@dataclass
class Action:
    type: str
    text: str
    url: str
    style: str = ""

    def to_dict(self) -> dict[str, t.Any]:
        return {"type": self.type, "text": self.text, "url": self.url, "style": self.style}


@dataclass
class Attachment:
    """
    Rich content block of a message.

    Every attribute is optional. Unset attributes are still sent, as null.
    """

    fallback: str | None = None
    color: str | None = None
    pretext: str | None = None
    author_name: str | None = None
    author_link: str | None = None
    author_icon: str | None = None
    title: str | None = None
    title_link: str | None = None
    text: str | None = None
    image_url: str | None = None
    fields: list[Field] | None = None
    footer: str | None = None
    footer_icon: str | None = None
    ts: int | None = None  # epoch seconds, floats are truncated
    mrkdwn_in: list[str] | None = None
    actions: list[Action] | None = None
    callback_id: str | None = None
    thumb_url: str | None = None

    def add_field(self, field: Field) -> "Attachment":
        """Append a field. Returns the attachment so calls can be chained."""
        if self.fields is None:
            self.fields = []
        self.fields.append(field)
        return self

    def add_action(self, action: Action) -> "Attachment":
        """Append an action button. Returns the attachment so calls can be chained."""
        if self.actions is None:
            self.actions = []
        self.actions.append(action)
        return self

    def to_dict(self) -> dict[str, t.Any]:
        return {
            "fallback": self.fallback,
            "color": self.color,
            "pretext": self.pretext,
            "author_name": self.author_name,
            "author_link": self.author_link,
            "author_icon": self.author_icon,
            "title": self.title,
            "title_link": self.title_link,
            "text": self.text,
            "image_url": self.image_url,
            "fields": None if self.fields is None else _dump_all(self.fields, Field),
            "footer": self.footer,
            "footer_icon": self.footer_icon,
            "ts": None if self.ts is None else int(self.ts),
            "mrkdwn_in": None if self.mrkdwn_in is None else list(self.mrkdwn_in),
            "actions": None if self.actions is None else _dump_all(self.actions, Action),
            "callback_id": self.callback_id,
            "thumb_url": self.thumb_url,
        }


@dataclass
class Payload:
    """Top-level webhook message. Empty values are omitted from the wire form."""

    parse: str = ""
    username: str = ""
    icon_url: str = ""
    icon_emoji: str = ""
    channel: str = ""
    text: str = ""
    link_names: str = ""
    attachments: list[Attachment] = field(default_factory=list)
    unfurl_links: bool = False
    unfurl_media: bool = False
    mrkdwn: bool = False

    def to_dict(self) -> dict[str, t.Any]:
        data: dict[str, t.Any] = {}
        for key in ("parse", "username", "icon_url", "icon_emoji", "channel", "text", "link_names"):
            value = getattr(self, key)
            if value:
                data[key] = value
        if self.attachments:
            data["attachments"] = _dump_all(self.attachments, Attachment)
        # Booleans follow the same rule: only true values go on the wire
        for key in ("unfurl_links", "unfurl_media", "mrkdwn"):
            if getattr(self, key):
                data[key] = True
        return data

    def to_json(self) -> bytes:
        """
        Serialize to the JSON request body.

        Raises:
            TypeError, ValueError, OverflowError: If a value cannot be encoded as JSON
        """
        return json.dumps(self.to_dict(), allow_nan=False).encode("utf-8")


def _dump_all(items: list, kind: type) -> list[dict[str, t.Any]]:
    """Serialize builder objects; plain dicts and other values are rejected."""
    dumped = []
    for item in items:
        if not isinstance(item, kind):
            raise TypeError(f"Expected {kind.__name__}, got {type(item).__name__}")
        dumped.append(item.to_dict())
    return dumped
