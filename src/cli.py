"""Click CLI for compiling and sending WhatsApp messages."""

from __future__ import annotations

import json
from pathlib import Path

import click
from pydantic import ValidationError

from src.audit.logger import validate_audit_chain
from src.driver import WhatsAppDriver
from src.models import DriverConfig, IncomingMessage
from src.outbound.compiler import ConfigurationError
from src.outbound.dispatcher import WhatsAppConnectionError
from src.outbound.models import PlainText, outgoing_message_adapter
from src.outbound.transport import HttpxTransport


@click.group()
@click.option("--url", envvar="WHATSAPP_URL", default="", help="API base URL.")
@click.option("--token", envvar="WHATSAPP_TOKEN", default="", help="Bearer token.")
@click.option("--strict/--lenient", envvar="WHATSAPP_THROW_HTTP_EXCEPTIONS", default=False,
              help="Fail on non-success responses instead of returning them.")
@click.option("--timeout", envvar="WHATSAPP_TIMEOUT_SECONDS", type=float, default=30.0,
              help="Request timeout in seconds.")
@click.pass_context
def cli(ctx: click.Context, url: str, token: str, strict: bool, timeout: float) -> None:
    """WhatsApp Cloud API driver CLI."""
    ctx.ensure_object(dict)
    config = DriverConfig(
        url=url, token=token, throw_http_exceptions=strict, timeout_seconds=timeout,
    )
    ctx.obj["driver"] = WhatsAppDriver(config, HttpxTransport(config.timeout_seconds))


@cli.command("compile")
@click.argument("message_json")
@click.option("--to", "recipient", required=True, help="Recipient WhatsApp id.")
@click.pass_context
def compile_message(ctx: click.Context, message_json: str, recipient: str) -> None:
    """Print the API payload for MESSAGE_JSON without sending it."""
    driver: WhatsAppDriver = ctx.obj["driver"]
    try:
        message = outgoing_message_adapter.validate_json(message_json)
        payload = driver.build_service_payload(
            message, IncomingMessage(text="", sender=recipient, recipient=recipient),
        )
    except (ValidationError, ConfigurationError) as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(json.dumps(payload, indent=2))


@cli.command("send-text")
@click.argument("text")
@click.option("--to", "recipient", required=True, help="Recipient WhatsApp id.")
@click.pass_context
def send_text(ctx: click.Context, text: str, recipient: str) -> None:
    """Send TEXT as a plain text message."""
    driver: WhatsAppDriver = ctx.obj["driver"]
    if not driver.is_configured():
        raise click.ClickException("WHATSAPP_URL is not configured")
    matching = IncomingMessage(text="", sender=recipient, recipient=recipient)
    try:
        response = driver.reply(PlainText(text=text), matching)
    except WhatsAppConnectionError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Status: {response.status_code}")
    if not response.is_success():
        raise SystemExit(1)


@cli.command("verify-audit")
@click.argument("log_path", type=click.Path(exists=True, dir_okay=False))
def verify_audit(log_path: str) -> None:
    """Check the hash chain of a delivery audit log."""
    result = validate_audit_chain(Path(log_path))
    if not result.valid:
        raise click.ClickException(f"Audit chain broken at line {result.broken_at_line}")
    click.echo("Audit chain valid")
