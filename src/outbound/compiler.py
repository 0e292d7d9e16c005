"""Compile outgoing messages into WhatsApp Cloud API request bodies."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from src.models import IncomingMessage
from src.outbound.merge import deep_merge
from src.outbound.models import (
    Action,
    Attachment,
    ButtonTemplate,
    PlainText,
    Question,
    TextTemplate,
)

MAX_REPLY_BUTTONS = 3


class ConfigurationError(Exception):
    """Raised when an outgoing message cannot be expressed for the provider."""


class TooManyButtonsError(ConfigurationError):
    """Raised when a question carries more reply buttons than WhatsApp allows."""

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(
            f"WhatsApp does not support more than {MAX_REPLY_BUTTONS} buttons (got {count})"
        )


def resolve_recipient(message: IncomingMessage) -> str:
    return message.recipient or message.sender


def action_to_button(action: Action) -> dict[str, Any]:
    return {"type": "reply", "reply": {"id": action.value, "title": action.text}}


def actions_to_buttons(actions: Sequence[Action]) -> list[dict[str, Any]]:
    return [action_to_button(a) for a in actions if a.type == "button"]


def actions_to_list(actions: Sequence[Action]) -> dict[str, Any]:
    """Build a single-section list action from the first action, if it is a select."""
    if not actions or actions[0].type != "select":
        return {}
    select = actions[0]
    return {
        "sections": [{
            "title": select.text,
            "rows": [{"id": o.value, "title": o.text} for o in select.options],
        }],
        "button": select.text,
    }


def _text_fields(text: str) -> dict[str, Any]:
    return {"type": "text", "text": {"body": text}}


def _compile_question(message: Question) -> dict[str, Any]:
    fields = _text_fields(message.text)

    buttons = actions_to_buttons(message.actions)
    if buttons:
        if len(buttons) > MAX_REPLY_BUTTONS:
            raise TooManyButtonsError(len(buttons))
        fields["type"] = "interactive"
        fields["interactive"] = {
            "type": "button",
            "body": {"text": message.text},
            "action": {"buttons": buttons},
        }

    # A select menu replaces any button payload built above.
    list_action = actions_to_list(message.actions)
    if list_action:
        fields["type"] = "interactive"
        fields["interactive"] = {
            "type": "list",
            "body": {"text": message.text},
            "action": list_action,
        }
    return fields


def _compile_button_template(message: ButtonTemplate) -> dict[str, Any]:
    return {
        "type": "interactive",
        "interactive": {
            "type": "button",
            "body": {"text": message.text},
            "action": {"buttons": [dict(b) for b in message.buttons]},
        },
    }


def _compile_text_template(message: TextTemplate) -> dict[str, Any]:
    return _text_fields(message.text)


def _compile_attachment(message: Attachment) -> dict[str, Any]:
    if message.attachment is not None and message.attachment.type == "image":
        return {"type": "image", "image": {"link": message.attachment.url}}
    return _text_fields(message.text)


def _compile_plain_text(message: PlainText) -> dict[str, Any]:
    return _text_fields(message.text)


# One entry per OutgoingMessage variant, keyed by its ``kind`` tag.
COMPILERS: dict[str, Callable[[Any], dict[str, Any]]] = {
    "question": _compile_question,
    "button_template": _compile_button_template,
    "text_template": _compile_text_template,
    "attachment": _compile_attachment,
    "text": _compile_plain_text,
}


def compile_payload(
    message: PlainText | Question | ButtonTemplate | TextTemplate | Attachment,
    recipient: str,
    additional_parameters: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Return the request body for sending ``message`` to ``recipient``.

    ``additional_parameters`` are merged into the base fields before the
    message-specific fields are applied, so the latter always win.

    Raises:
        TooManyButtonsError: If a question has more than three button actions.
        ValueError: If the message kind has no compiler.
    """
    compile_fields = COMPILERS.get(message.kind)
    if compile_fields is None:
        raise ValueError(f"Unsupported outgoing message kind: {message.kind!r}")

    payload = deep_merge(
        {"messaging_product": "whatsapp", "to": recipient},
        additional_parameters or {},
    )
    payload.update(compile_fields(message))
    return payload
