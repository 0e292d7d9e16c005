"""Sender profile lookup from the webhook contacts list."""

from __future__ import annotations

from src.models import IncomingMessage, User
from src.webhook.access import dig_dict, dig_str


def resolve_user(message: IncomingMessage) -> User:
    contact = dig_dict(message.payload, "contacts", 0)
    wa_id = dig_str(contact, "wa_id")
    return User(
        id=wa_id,
        first_name=dig_str(contact, "profile", "name"),
        username=wa_id,
        info=contact,
    )
