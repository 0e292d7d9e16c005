"""Shared Pydantic data models for the WhatsApp driver."""

from __future__ import annotations

import os
import pprint
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# --- Enums ---


class AuditEventType(str, Enum):
    WEBHOOK_RECEIVED = "webhook_received"
    MESSAGE_SENT = "message_sent"
    MESSAGE_FAILED = "message_failed"


# --- Configuration ---


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


class DriverConfig(BaseModel):
    """Static driver configuration, read-only once loaded."""

    model_config = ConfigDict(frozen=True)

    url: str = ""
    token: str = ""
    throw_http_exceptions: bool = False
    timeout_seconds: float = Field(default=30.0, gt=0)

    @classmethod
    def from_env(cls) -> DriverConfig:
        """Create DriverConfig from WHATSAPP_* environment variables."""
        return cls(
            url=os.environ.get("WHATSAPP_URL", ""),
            token=os.environ.get("WHATSAPP_TOKEN", ""),
            throw_http_exceptions=_env_flag("WHATSAPP_THROW_HTTP_EXCEPTIONS"),
            timeout_seconds=float(os.environ.get("WHATSAPP_TIMEOUT_SECONDS", "30")),
        )


# --- Inbound Models ---


class IncomingMessage(BaseModel):
    """A single inbound message as seen by the conversation framework."""

    model_config = ConfigDict(frozen=True)

    text: str
    sender: str
    recipient: str
    payload: dict[str, Any] = Field(default_factory=dict)


class Answer(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    value: str | None = None
    interactive_reply: bool = False
    message: IncomingMessage | None = None


class User(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    first_name: str
    last_name: str | None = None
    username: str
    info: dict[str, Any] = Field(default_factory=dict)


# --- Dispatch Models ---


class DiagnosticError(BaseModel):
    """Everything needed to diagnose a failed API call without re-deriving state."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    title: str
    code: str
    url: str
    url_parameters: dict[str, Any] = Field(default_factory=dict)
    post_parameters: dict[str, Any] = Field(default_factory=dict)
    headers: dict[str, str] = Field(default_factory=dict)

    def render(self) -> str:
        return (
            f"Status Code: {self.status_code}\n"
            f"Description: {self.title}\n"
            f"Error Code: {self.code}\n"
            f"URL: {self.url}\n"
            f"URL Parameters: {pprint.pformat(self.url_parameters)}\n"
            f"Post Parameters: {pprint.pformat(self.post_parameters)}\n"
            f"Headers: {pprint.pformat(self.headers)}\n"
        )


# --- Audit Models ---


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class AuditEvent(BaseModel):
    timestamp: str = Field(default_factory=_now_iso)
    event_type: AuditEventType
    recipient_id: str | None = None
    action: str
    result: str  # "success" | "failure" | "ignored"
    details: dict[str, object] | None = None
