"""Tests for webhook envelope normalization."""

from __future__ import annotations

import json

from src.webhook.normalizer import WebhookPayload, decode_body
from tests.conftest import make_body, make_envelope, make_event, make_value


class TestEventExtraction:

    def test_event_is_first_message(self) -> None:
        first = make_event(id="first")
        second = make_event(id="second")
        payload = WebhookPayload.from_body(make_body(make_value(messages=[first, second])))
        assert payload.event["id"] == "first"

    def test_event_is_value_without_messages(self) -> None:
        value = {"messaging_product": "whatsapp", "statuses": [{"status": "read"}]}
        payload = WebhookPayload.from_body(make_body(value))
        assert payload.event == value

    def test_empty_messages_list_falls_back_to_value(self) -> None:
        value = make_value(messages=[])
        payload = WebhookPayload.from_body(make_body(value))
        assert payload.event is payload.value

    def test_raw_and_content_are_retained(self) -> None:
        body = make_body()
        payload = WebhookPayload.from_body(body)
        assert payload.raw == make_envelope()
        assert payload.content == body.decode()


class TestMalformedEnvelopes:

    def test_missing_entry_gives_empty_event(self) -> None:
        payload = WebhookPayload.from_body(b'{"object": "whatsapp_business_account"}')
        assert payload.value == {}
        assert payload.event == {}

    def test_empty_changes_gives_empty_event(self) -> None:
        payload = WebhookPayload.from_body(json.dumps({"entry": [{"changes": []}]}))
        assert payload.event == {}

    def test_invalid_json_gives_empty_event(self) -> None:
        payload = WebhookPayload.from_body(b"not json")
        assert payload.raw == {}
        assert payload.event == {}

    def test_deeply_nested_body_gives_empty_event(self) -> None:
        payload = WebhookPayload.from_body(b"[" * 200_000 + b"]" * 200_000)
        assert payload.raw == {}
        assert payload.event == {}
        assert payload.matches_request() is False

    def test_non_object_json_decodes_to_empty(self) -> None:
        assert decode_body(b"[1, 2, 3]") == {}


class TestMatchesRequest:

    def test_matches_whatsapp_product(self) -> None:
        assert WebhookPayload.from_body(make_body()).matches_request() is True

    def test_rejects_other_product(self) -> None:
        body = make_body(make_value(messaging_product="instagram"))
        assert WebhookPayload.from_body(body).matches_request() is False

    def test_rejects_empty_envelope(self) -> None:
        assert WebhookPayload.from_body(b"{}").matches_request() is False
