"""WhatsApp Cloud API driver: the single entry point for a host bot framework."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from src.models import Answer, DriverConfig, IncomingMessage, User
from src.outbound.compiler import compile_payload, resolve_recipient
from src.outbound.dispatcher import Dispatcher
from src.webhook.answers import resolve_answer
from src.webhook.classifier import InboundRequest
from src.webhook.users import resolve_user

if TYPE_CHECKING:
    from src.audit.logger import AuditLogger
    from src.outbound.models import OutgoingMessage
    from src.outbound.transport import Transport, TransportResponse

logger = logging.getLogger(__name__)


class WhatsAppDriver:
    """Translates between the bot framework and the WhatsApp Cloud API."""

    DRIVER_NAME = "WhatsApp"

    def __init__(
        self,
        config: DriverConfig,
        transport: Transport,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self.config = config
        self._dispatcher = Dispatcher(config, transport, audit_logger)

    def build_request(self, body: bytes | str) -> InboundRequest:
        return InboundRequest.from_body(body)

    def matches_request(self, request: InboundRequest) -> bool:
        return request.matches_request()

    def get_messages(self, request: InboundRequest) -> list[IncomingMessage]:
        return request.get_messages()

    def get_user(self, message: IncomingMessage) -> User:
        return resolve_user(message)

    def get_conversation_answer(self, message: IncomingMessage) -> Answer:
        return resolve_answer(message)

    def build_service_payload(
        self,
        message: OutgoingMessage,
        matching_message: IncomingMessage,
        additional_parameters: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return compile_payload(
            message, resolve_recipient(matching_message), additional_parameters,
        )

    def send_payload(self, payload: dict[str, Any]) -> TransportResponse:
        return self._dispatcher.send_payload(payload)

    def reply(
        self,
        message: OutgoingMessage,
        matching_message: IncomingMessage,
        additional_parameters: dict[str, Any] | None = None,
    ) -> TransportResponse:
        """Compile ``message`` for the sender of ``matching_message`` and send it."""
        payload = self.build_service_payload(message, matching_message, additional_parameters)
        return self.send_payload(payload)

    def send_request(
        self,
        endpoint: str,
        parameters: dict[str, Any],
        matching_message: IncomingMessage,
    ) -> TransportResponse:
        return self._dispatcher.send_request(endpoint, parameters, matching_message.recipient)

    def is_configured(self) -> bool:
        return bool(self.config.url)
