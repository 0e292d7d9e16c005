"""Tests for the driver facade used by the bot framework."""

from __future__ import annotations

import pytest

from src.driver import WhatsAppDriver
from src.outbound.compiler import TooManyButtonsError
from src.outbound.dispatcher import WhatsAppConnectionError
from src.outbound.models import Action, PlainText, Question
from tests.conftest import make_body, make_config, make_event, make_incoming, make_transport, make_value


def _driver(**config: object) -> WhatsAppDriver:
    return WhatsAppDriver(make_config(**config), make_transport())


def test_inbound_flow() -> None:
    driver = _driver()
    event = make_event(type="interactive", interactive={
        "type": "button_reply", "button_reply": {"id": "yes", "title": "Yes please"},
    })
    request = driver.build_request(make_body(make_value(messages=[event])))

    assert driver.matches_request(request)
    messages = driver.get_messages(request)
    assert [m.text for m in messages] == ["Yes please"]
    answer = driver.get_conversation_answer(messages[0])
    assert answer.value == "yes"
    assert driver.get_user(messages[0]).first_name == "Ada"


def test_build_service_payload_uses_sender_when_recipient_empty() -> None:
    matching = make_incoming(sender="777", recipient="")
    payload = _driver().build_service_payload(PlainText(text="hi"), matching)
    assert payload["to"] == "777"


def test_build_service_payload_rejects_four_buttons() -> None:
    actions = [Action(type="button", text=str(i), value=str(i)) for i in range(4)]
    with pytest.raises(TooManyButtonsError):
        _driver().build_service_payload(Question(text="Q", actions=actions), make_incoming())


def test_reply_compiles_and_sends() -> None:
    transport = make_transport()
    driver = WhatsAppDriver(make_config(), transport)
    response = driver.reply(PlainText(text="pong"), make_incoming(recipient="1555"))
    assert response.is_success()
    body = transport.post.call_args.args[2]
    assert body == {
        "messaging_product": "whatsapp", "to": "1555", "type": "text", "text": {"body": "pong"},
    }


def test_send_request_uses_matching_recipient() -> None:
    transport = make_transport()
    driver = WhatsAppDriver(make_config(), transport)
    driver.send_request("messages", {"type": "text"}, make_incoming(recipient="42"))
    assert transport.post.call_args.args[2] == {"to": "42", "type": "text"}


def test_strict_mode_raises_through_driver() -> None:
    driver = WhatsAppDriver(
        make_config(throw_http_exceptions=True), make_transport(status_code=400, content=b"{}"),
    )
    with pytest.raises(WhatsAppConnectionError):
        driver.send_payload({"to": "1"})


def test_is_configured() -> None:
    assert _driver().is_configured() is True
    assert _driver(url="").is_configured() is False
