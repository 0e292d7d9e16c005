"""HTTP transport used by the dispatcher."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    content: bytes = b""

    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        return json.loads(self.content)


class Transport(Protocol):
    def post(
        self,
        url: str,
        url_parameters: dict[str, Any],
        body_parameters: dict[str, Any],
        headers: dict[str, str],
        as_json: bool = False,
    ) -> TransportResponse: ...


class HttpxTransport:
    """Blocking transport backed by httpx, one connection per call."""

    def __init__(self, timeout_seconds: float = 30.0, verify: bool = True) -> None:
        self._timeout = timeout_seconds
        self._verify = verify

    def post(
        self,
        url: str,
        url_parameters: dict[str, Any],
        body_parameters: dict[str, Any],
        headers: dict[str, str],
        as_json: bool = False,
    ) -> TransportResponse:
        with httpx.Client(verify=self._verify, timeout=self._timeout) as client:
            if as_json:
                resp = client.post(
                    url, params=url_parameters or None, json=body_parameters, headers=headers,
                )
            else:
                resp = client.post(
                    url, params=url_parameters or None, data=body_parameters, headers=headers,
                )
        logger.debug("POST %s -> %s", url, resp.status_code)
        return TransportResponse(status_code=resp.status_code, content=resp.content)
