"""Webhook payload normalization.

Extracts the single relevant event from a WhatsApp Cloud API webhook
envelope (``entry[0].changes[0].value``). Malformed or partial envelopes
degrade to an empty event instead of raising.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from src.webhook.access import dig, dig_dict

logger = logging.getLogger(__name__)

MESSAGING_PRODUCT = "whatsapp"


def decode_body(body: bytes | str) -> dict[str, Any]:
    """Decode a request body into a JSON object, or ``{}`` if it is not one."""
    try:
        tree = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
        logger.debug("Webhook body is not valid JSON; treating as empty")
        return {}
    return tree if isinstance(tree, dict) else {}


class WebhookPayload:
    """One decoded webhook request."""

    def __init__(self, raw: dict[str, Any], content: str = "") -> None:
        self.raw = raw
        self.content = content
        self.value: dict[str, Any] = dig_dict(raw, "entry", 0, "changes", 0, "value")
        messages = dig(self.value, "messages")
        if isinstance(messages, list) and messages and isinstance(messages[0], dict):
            self.event: dict[str, Any] = messages[0]
        else:
            self.event = self.value

    @classmethod
    def from_body(cls, body: bytes | str) -> WebhookPayload:
        content = body.decode(errors="replace") if isinstance(body, bytes) else body
        return cls(decode_body(body), content)

    def matches_request(self) -> bool:
        """True iff the webhook was sent by the WhatsApp messaging product."""
        return self.value.get("messaging_product") == MESSAGING_PRODUCT
