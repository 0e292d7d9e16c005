"""Conversation answer resolution for inbound messages."""

from __future__ import annotations

from src.models import Answer, IncomingMessage
from src.webhook.access import dig, dig_str

_REPLY_TYPES = ("button_reply", "list_reply")


def resolve_answer(message: IncomingMessage) -> Answer:
    """Build the answer for ``message``.

    The text is always the message text. Button and list replies also carry
    the id of the chosen option as ``value``.
    """
    first = dig(message.payload, "messages", 0, default={})
    if dig(first, "type") == "interactive":
        reply_type = dig(first, "interactive", "type")
        if reply_type in _REPLY_TYPES:
            return Answer(
                text=message.text,
                value=dig_str(first, "interactive", reply_type, "id"),
                interactive_reply=True,
                message=message,
            )
    return Answer(text=message.text, message=message)
