"""Shared test fixtures for the Quercle node tests."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from quercle_node import Context, HTTPClient, Item, LogLevel, MockHostBridge

API_KEY = "qk_test_key"


class RecordingAPI:
    """Fake Quercle API answering from a list of handlers and recording calls."""

    def __init__(self, responses: list[Any] | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self._responses = list(responses or [])

    @property
    def bodies(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests]

    @property
    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def _respond(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            return httpx.Response(200, json={"result": f"answer {len(self.requests)}"})
        canned = self._responses.pop(0)
        if isinstance(canned, Exception):
            raise canned
        if isinstance(canned, httpx.Response):
            return canned
        return httpx.Response(200, json=canned)

    def handler(self, request: httpx.Request) -> httpx.Response:
        return self._respond(request)

    async def async_handler(self, request: httpx.Request) -> httpx.Response:
        return self._respond(request)

    def client(self, api_key: str = API_KEY) -> HTTPClient:
        return HTTPClient(
            api_key,
            base_url="https://api.test.quercle.dev",
            transport=httpx.MockTransport(self.handler),
            async_transport=httpx.MockTransport(self.async_handler),
        )


@pytest.fixture
def host() -> MockHostBridge:
    return MockHostBridge(credentials={"quercleApi": {"apiKey": API_KEY}})


@pytest.fixture
def api() -> RecordingAPI:
    return RecordingAPI()


def make_context(
    items: list[dict[str, Any]] | None = None,
    parameters: dict[str, Any] | None = None,
    *,
    host: MockHostBridge | None = None,
    continue_on_fail: bool = False,
    log_level: int = LogLevel.DEBUG,
) -> Context:
    """Helper to build a Context; each entry of ``items`` is that item's parameter overrides."""
    return Context(
        [Item(json={"index": i}, parameters=p) for i, p in enumerate([{}] if items is None else items)],
        parameters,
        continue_on_fail=continue_on_fail,
        log_level=log_level,
        host=host or MockHostBridge(),
    )
