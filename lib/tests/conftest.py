from __future__ import annotations

import json
from typing import Any

import pytest

from etherpad_client import ClientConfig, EtherpadClient

OK = {"code": 0, "message": "ok", "data": None}


class FakeTransport:
    """Answers by api function name; the bare /api probe gets ``version_body``."""

    def __init__(self, responses: dict[str, Any] | None = None, version_body: Any = None) -> None:
        self.responses = dict(responses or {})
        self.version_body = {"currentVersion": "1.3.0"} if version_body is None else version_body
        self.calls: list[tuple[str, str, dict[str, str]]] = []
        self.closed = False

    def get(self, url: str, params=None) -> bytes | None:
        return self._answer("GET", url, params)

    def post(self, url: str, params=None) -> bytes | None:
        return self._answer("POST", url, params)

    def close(self) -> None:
        self.closed = True

    def calls_to(self, function: str) -> list[tuple[str, str, dict[str, str]]]:
        return [c for c in self.calls if c[1].endswith(f"/{function}")]

    def _answer(self, method: str, url: str, params) -> bytes | None:
        self.calls.append((method, url, dict(params or {})))
        if url.endswith("/api"):
            body = self.version_body
        else:
            body = self.responses.get(url.rsplit("/", 1)[1], OK)
        if body is None or isinstance(body, bytes):
            return body
        return json.dumps(body).encode("utf-8")


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def make_client(transport):
    def _make(**overrides: Any) -> EtherpadClient:
        values = {"apikey": "secret", "base_url": "http://pad.example.test/", "cookie_time": 3600}
        values.update(overrides)
        return EtherpadClient(ClientConfig(**values), transport=transport, clock=lambda: 1_700_000_000)

    return _make
