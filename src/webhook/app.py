"""FastAPI webhook receiver wired to the WhatsApp driver."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from src.audit.logger import AuditLogger
from src.driver import WhatsAppDriver
from src.models import AuditEvent, AuditEventType, DriverConfig, IncomingMessage
from src.outbound.transport import HttpxTransport

logger = logging.getLogger(__name__)

MessageHandler = Callable[[WhatsAppDriver, IncomingMessage], None]


def log_message(driver: WhatsAppDriver, message: IncomingMessage) -> None:
    logger.info("Incoming WhatsApp message from %s: %s", message.sender, message.text[:80])


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    config = DriverConfig.from_env()
    audit_log = os.environ.get("WHATSAPP_AUDIT_LOG_PATH")
    audit_logger = AuditLogger.from_env(audit_log) if audit_log else None
    driver = WhatsAppDriver(
        config, HttpxTransport(config.timeout_seconds), audit_logger,
    )
    return create_app(driver, log_message, audit_logger)


def create_app(
    driver: WhatsAppDriver,
    handler: MessageHandler,
    audit_logger: AuditLogger | None = None,
) -> FastAPI:
    """Create the webhook app; every classified message is passed to ``handler``."""
    app = FastAPI(docs_url=None, redoc_url=None)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/webhook/whatsapp")
    async def receive(request: Request) -> JSONResponse:
        inbound = driver.build_request(await request.body())
        if not driver.matches_request(inbound):
            return JSONResponse({"error": "Not a WhatsApp webhook"}, status_code=404)

        messages = driver.get_messages(inbound)
        failed = 0
        for message in messages:
            try:
                await run_in_threadpool(handler, driver, message)
            except Exception:
                # The webhook is always acknowledged; failures are logged per message.
                failed += 1
                logger.exception("Handler failed for message from %s", message.sender)

        if audit_logger:
            audit_logger.log(AuditEvent(
                event_type=AuditEventType.WEBHOOK_RECEIVED,
                recipient_id=messages[0].sender if messages else None,
                action="receive",
                result="failure" if failed else ("success" if messages else "ignored"),
                details={"messages": len(messages), "failed": failed},
            ))
        return JSONResponse({"status": "ok", "messages": len(messages)})

    return app
