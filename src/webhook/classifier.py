"""Inbound message classification by event type."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from src.models import IncomingMessage
from src.webhook.access import dig, dig_str
from src.webhook.normalizer import WebhookPayload


def _reply_text(event: dict[str, Any]) -> str:
    interactive = dig(event, "interactive", default={})
    if dig(interactive, "button_reply") is not None:
        return dig_str(interactive, "button_reply", "title")
    if dig(interactive, "list_reply") is not None:
        return dig_str(interactive, "list_reply", "title")
    return dig_str(event, "button", "text")


# Checked in order; first matching type wins.
_TEXT_EXTRACTORS: list[tuple[tuple[str, ...], Callable[[dict[str, Any]], str]]] = [
    (("text",), lambda event: dig_str(event, "text", "body")),
    (("image",), lambda event: dig_str(event, "image", "caption")),
    (("document",), lambda event: dig_str(event, "document", "caption")),
    (("location",), lambda event: dig_str(event, "location", "name")),
    (("button", "interactive"), _reply_text),
]


def classify(event: dict[str, Any], payload: dict[str, Any]) -> list[IncomingMessage]:
    """Map an event to zero or one normalized messages.

    Unknown event types produce an empty list. Missing sub-fields produce
    empty text, never an exception.
    """
    event_type = dig(event, "type")
    for types, extract in _TEXT_EXTRACTORS:
        if event_type in types:
            sender = dig_str(event, "from")
            return [IncomingMessage(
                text=extract(event),
                sender=sender,
                recipient=sender,
                payload=payload,
            )]
    return []


class InboundRequest:
    """A webhook request plus its classified messages, computed once."""

    def __init__(self, payload: WebhookPayload) -> None:
        self.payload = payload
        self._messages: list[IncomingMessage] | None = None

    @classmethod
    def from_body(cls, body: bytes | str) -> InboundRequest:
        return cls(WebhookPayload.from_body(body))

    def matches_request(self) -> bool:
        return self.payload.matches_request()

    def get_messages(self) -> list[IncomingMessage]:
        if self._messages is None:
            self._messages = classify(self.payload.event, self.payload.value)
        return self._messages
