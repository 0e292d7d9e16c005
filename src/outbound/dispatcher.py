"""Request dispatch to the WhatsApp Cloud API.

A single attempt per call. In strict mode (``throw_http_exceptions``) a
non-success response becomes a WhatsAppConnectionError carrying a
DiagnosticError; in lenient mode the raw response is returned.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from src.models import DiagnosticError, DriverConfig
from src.outbound.merge import deep_merge
from src.outbound.transport import Transport, TransportResponse
from src.webhook.access import dig

if TYPE_CHECKING:
    from src.audit.logger import AuditLogger

logger = logging.getLogger(__name__)

MESSAGES_ENDPOINT = "messages"
NO_DESCRIPTION = "No description from Vendor"
NO_ERROR_CODE = "No error code from Vendor"


class WhatsAppConnectionError(Exception):
    """Raised in strict mode when the API answers with a non-success status."""

    def __init__(self, diagnostic: DiagnosticError) -> None:
        self.diagnostic = diagnostic
        super().__init__(diagnostic.render())


def parse_vendor_error(content: bytes) -> tuple[str, str]:
    """Return ``(title, code)`` from an error body, substituting placeholders."""
    try:
        data = json.loads(content) if content else None
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
        data = None
    errors = dig(data, "errors")
    if not isinstance(errors, dict):
        errors = {}
    title = errors.get("title")
    code = errors.get("code")
    return (
        NO_DESCRIPTION if title is None else str(title),
        NO_ERROR_CODE if code is None else str(code),
    )


class Dispatcher:
    """Sends compiled payloads with bearer authentication."""

    def __init__(
        self,
        config: DriverConfig,
        transport: Transport,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._audit = audit_logger

    def build_api_url(self, endpoint: str) -> str:
        return f"{self._config.url.rstrip('/')}/{endpoint}"

    def build_auth_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._config.token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def send_payload(self, payload: dict[str, Any]) -> TransportResponse:
        """Send a fully built payload to the messages endpoint."""
        return self._post(self.build_api_url(MESSAGES_ENDPOINT), {}, payload)

    def send_request(
        self, endpoint: str, parameters: dict[str, Any], recipient: str,
    ) -> TransportResponse:
        """Send ``parameters`` to an arbitrary endpoint, defaulting ``to`` to ``recipient``."""
        body = deep_merge({"to": recipient}, parameters)
        return self._post(self.build_api_url(endpoint), {}, body)

    def _post(
        self,
        url: str,
        url_parameters: dict[str, Any],
        post_parameters: dict[str, Any],
    ) -> TransportResponse:
        headers = self.build_auth_headers()
        response = self._transport.post(
            url, url_parameters, post_parameters, headers, as_json=True,
        )
        success = response.is_success()
        if self._audit:
            recipient = post_parameters.get("to")
            self._audit.record_delivery(
                url, response.status_code, success,
                recipient_id=str(recipient) if recipient is not None else None,
            )

        if success:
            logger.debug("WhatsApp API call to %s succeeded (%s)", url, response.status_code)
            return response

        logger.warning("WhatsApp API call to %s failed with status %s", url, response.status_code)
        if not self._config.throw_http_exceptions:
            return response

        title, code = parse_vendor_error(response.content)
        raise WhatsAppConnectionError(DiagnosticError(
            status_code=response.status_code,
            title=title,
            code=code,
            url=url,
            url_parameters=url_parameters,
            post_parameters=post_parameters,
            headers=headers,
        ))
