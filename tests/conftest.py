"""Shared test fixtures for the WhatsApp driver."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock

import pytest

from src.audit.logger import AuditLogger
from src.models import DriverConfig, IncomingMessage
from src.outbound.transport import Transport, TransportResponse

# --- Factory functions for test data ---


def make_event(**kwargs: Any) -> dict[str, Any]:
    """Factory for a single webhook message event."""
    defaults: dict[str, Any] = {
        "from": "15551234567",
        "id": "wamid.TEST",
        "timestamp": "1700000000",
        "type": "text",
        "text": {"body": "hello"},
    }
    defaults.update(kwargs)
    return defaults


def make_value(
    messages: list[dict[str, Any]] | None = None,
    **kwargs: Any,
) -> dict[str, Any]:
    """Factory for the ``entry[0].changes[0].value`` object."""
    value: dict[str, Any] = {
        "messaging_product": "whatsapp",
        "metadata": {"phone_number_id": "PHONE_ID"},
        "contacts": [{"wa_id": "15551234567", "profile": {"name": "Ada"}}],
        "messages": [make_event()] if messages is None else messages,
    }
    value.update(kwargs)
    return value


def make_envelope(value: dict[str, Any] | None = None) -> dict[str, Any]:
    return {
        "object": "whatsapp_business_account",
        "entry": [{
            "id": "BUSINESS_ID",
            "changes": [{"value": make_value() if value is None else value, "field": "messages"}],
        }],
    }


def make_body(value: dict[str, Any] | None = None) -> bytes:
    return json.dumps(make_envelope(value)).encode()


def make_incoming(**kwargs: Any) -> IncomingMessage:
    defaults: dict[str, Any] = {
        "text": "hello",
        "sender": "15551234567",
        "recipient": "15551234567",
        "payload": make_value(),
    }
    defaults.update(kwargs)
    return IncomingMessage(**defaults)


def make_config(**kwargs: Any) -> DriverConfig:
    defaults: dict[str, Any] = {
        "url": "https://graph.example.com/v18.0/PHONE_ID",
        "token": "test-token",
        "throw_http_exceptions": False,
    }
    defaults.update(kwargs)
    return DriverConfig(**defaults)


def make_transport(
    status_code: int = 200, content: bytes = b'{"messages":[{"id":"wamid.OUT"}]}',
) -> MagicMock:
    transport = MagicMock(spec=Transport)
    transport.post.return_value = TransportResponse(status_code=status_code, content=content)
    return transport


@pytest.fixture
def mock_audit_logger() -> MagicMock:
    return MagicMock(spec=AuditLogger)
