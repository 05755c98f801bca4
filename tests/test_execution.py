from __future__ import annotations

import asyncio

import httpx
import pytest
from conftest import API_KEY, RecordingAPI, make_context

from quercle_node import (
    API_KEY_ENV,
    BASE_URL,
    BASE_URL_ENV,
    ConfigurationError,
    LogLevel,
    MockHostBridge,
    OperationError,
    ServerError,
    aexecute,
    execute,
)

SEARCH = {"operation": "search", "query": "what is httpx"}


def _three_items() -> list[dict]:
    return [
        {"query": "first"},
        {"query": "second"},
        {"query": "third"},
    ]


class TestHappyPath:
    def test_one_call_per_item_in_order(self, api: RecordingAPI, host: MockHostBridge) -> None:
        ctx = make_context(_three_items(), {"operation": "search"}, host=host)
        results = execute(ctx, api.client())
        assert [r.json for r in results] == [
            {"result": "answer 1"},
            {"result": "answer 2"},
            {"result": "answer 3"},
        ]
        assert [r.paired_item for r in results] == [{"item": 0}, {"item": 1}, {"item": 2}]
        assert [b["query"] for b in api.bodies] == ["first", "second", "third"]

    def test_per_item_operation_override(self, api: RecordingAPI) -> None:
        ctx = make_context(
            [
                {"query": "q"},
                {"operation": "fetch", "url": "https://example.com", "prompt": "summarize"},
            ],
            {"operation": "search", "domainFilter": "allowed", "domains": "a.com, b.com"},
        )
        execute(ctx, api.client())
        assert api.paths == ["/v1/search", "/v1/fetch"]
        assert api.bodies == [
            {"query": "q", "allowed_domains": ["a.com", "b.com"]},
            {"url": "https://example.com", "prompt": "summarize"},
        ]

    def test_empty_batch_makes_no_calls(self, api: RecordingAPI) -> None:
        ctx = make_context([], SEARCH)
        assert execute(ctx, api.client()) == []
        assert api.requests == []

    def test_default_operation_is_search(self, api: RecordingAPI) -> None:
        execute(make_context([{"query": "q"}]), api.client())
        assert api.paths == ["/v1/search"]


class TestFailureHandling:
    def _failing_api(self) -> RecordingAPI:
        return RecordingAPI([{"result": "one"}, httpx.Response(503, text="down"), {"result": "three"}])

    def test_continue_on_fail_keeps_pairing(self) -> None:
        api = self._failing_api()
        ctx = make_context(_three_items(), {"operation": "search"}, continue_on_fail=True)
        results = execute(ctx, api.client())
        assert len(results) == 3
        assert results[0].json == {"result": "one"}
        assert results[1].is_error
        assert "HTTP 503" in results[1].json["error"]
        assert results[2].json == {"result": "three"}
        assert [r.item_index for r in results] == [0, 1, 2]

    def test_abort_without_continue_on_fail(self) -> None:
        api = self._failing_api()
        ctx = make_context(_three_items(), {"operation": "search"})
        with pytest.raises(ServerError) as info:
            execute(ctx, api.client())
        partial = info.value.partial_results
        assert [r.json for r in partial] == [{"result": "one"}]
        assert len(api.requests) == 2

    def test_unknown_operation_is_per_item(self, api: RecordingAPI) -> None:
        ctx = make_context(
            [{"query": "a"}, {"operation": "crawl"}, {"query": "c"}],
            {"operation": "search"},
            continue_on_fail=True,
        )
        results = execute(ctx, api.client())
        assert results[1].json == {"error": "Unknown operation: crawl"}
        assert results[1].paired_item == {"item": 1}
        assert len(api.requests) == 2

    def test_unknown_operation_aborts(self, api: RecordingAPI) -> None:
        ctx = make_context([{"operation": "crawl"}, SEARCH])
        with pytest.raises(OperationError, match="crawl") as info:
            execute(ctx, api.client())
        assert info.value.item_index == 0
        assert info.value.partial_results == []
        assert api.requests == []

    def test_malformed_response_is_captured(self) -> None:
        api = RecordingAPI([{"answer": "wrong field"}])
        ctx = make_context([SEARCH], continue_on_fail=True)
        results = execute(ctx, api.client())
        assert "'result'" in results[0].json["error"]

    def test_non_string_domains_is_per_item(self, api: RecordingAPI) -> None:
        ctx = make_context(
            [{"query": "a"}, {"query": "b", "domainFilter": "allowed", "domains": ["a.com"]}, {"query": "c"}],
            {"operation": "search"},
            continue_on_fail=True,
        )
        results = execute(ctx, api.client())
        assert [r.item_index for r in results] == [0, 1, 2]
        assert results[1].json == {"error": "Parameter 'domains' must be a comma-separated string"}
        assert not results[2].is_error
        assert len(api.requests) == 2

    def test_unexpected_error_is_per_item(self, monkeypatch: pytest.MonkeyPatch) -> None:
        api = RecordingAPI()
        client = api.client()
        calls: list[str] = []

        def flaky(path: str, body: dict) -> str:
            calls.append(body["query"])
            if body["query"] == "second":
                raise KeyError("boom")
            return "ok"

        monkeypatch.setattr(client, "post_result", flaky)
        ctx = make_context(_three_items(), {"operation": "search"}, continue_on_fail=True)
        results = execute(ctx, client)
        assert calls == ["first", "second", "third"]
        assert results[1].is_error
        assert "boom" in results[1].json["error"]
        assert [r.json for r in (results[0], results[2])] == [{"result": "ok"}, {"result": "ok"}]

    def test_unexpected_error_aborts_with_partial_results(self, monkeypatch: pytest.MonkeyPatch) -> None:
        client = RecordingAPI().client()

        def flaky(path: str, body: dict) -> str:
            if body["query"] == "second":
                raise RuntimeError("boom")
            return "ok"

        monkeypatch.setattr(client, "post_result", flaky)
        with pytest.raises(RuntimeError, match="boom") as info:
            execute(make_context(_three_items(), {"operation": "search"}), client)
        assert [r.json for r in info.value.partial_results] == [{"result": "ok"}]


class TestApiKeyResolution:
    def test_missing_key_fails_before_any_call(self, monkeypatch: pytest.MonkeyPatch) -> None:
        sent: list[httpx.Request] = []
        monkeypatch.setattr(httpx.Client, "send", lambda self, request, **kw: sent.append(request))
        ctx = make_context([SEARCH, SEARCH], host=MockHostBridge(), continue_on_fail=True)
        with pytest.raises(ConfigurationError, match="No API key provided"):
            execute(ctx)
        assert sent == []

    def test_env_fallback_used_once(self, monkeypatch: pytest.MonkeyPatch) -> None:
        api = RecordingAPI()
        host = MockHostBridge(env={API_KEY_ENV: "qk_from_env"})
        opened: list[str] = []

        def fake_client(api_key: str, base_url: str | None = None):
            opened.append(api_key)
            return api.client(api_key)

        monkeypatch.setattr("quercle_node.execution.HTTPClient", fake_client)
        execute(make_context([SEARCH, SEARCH], host=host))
        assert opened == ["qk_from_env"]
        assert host.credential_requests == ["quercleApi"]
        assert {r.headers["authorization"] for r in api.requests} == {"Bearer qk_from_env"}

    def test_stored_credential(self, monkeypatch: pytest.MonkeyPatch, host: MockHostBridge) -> None:
        api = RecordingAPI()
        monkeypatch.setattr(
            "quercle_node.execution.HTTPClient",
            lambda api_key, base_url=None: api.client(api_key),
        )
        execute(make_context([SEARCH], host=host))
        assert api.requests[0].headers["authorization"] == f"Bearer {API_KEY}"

    def test_base_url_from_host_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        api = RecordingAPI()
        monkeypatch.setenv(BASE_URL_ENV, "https://process.example")
        host = MockHostBridge(env={API_KEY_ENV: "qk_env", BASE_URL_ENV: "http://localhost:9000/"})
        opened: list[str | None] = []

        def fake_client(api_key: str, base_url: str | None = None):
            opened.append(base_url)
            return api.client(api_key)

        monkeypatch.setattr("quercle_node.execution.HTTPClient", fake_client)
        execute(make_context([SEARCH], host=host))
        assert opened == ["http://localhost:9000"]

    def test_base_url_ignores_process_env_under_host(self, monkeypatch: pytest.MonkeyPatch) -> None:
        api = RecordingAPI()
        monkeypatch.setenv(BASE_URL_ENV, "https://process.example")
        opened: list[str | None] = []

        def fake_client(api_key: str, base_url: str | None = None):
            opened.append(base_url)
            return api.client(api_key)

        monkeypatch.setattr("quercle_node.execution.HTTPClient", fake_client)
        execute(make_context([SEARCH], host=MockHostBridge(env={API_KEY_ENV: "qk_env"})))
        assert opened == [BASE_URL]

    def test_unconventional_key_warns(self, monkeypatch: pytest.MonkeyPatch) -> None:
        api = RecordingAPI()
        host = MockHostBridge(credentials={"quercleApi": {"apiKey": "legacy"}})
        monkeypatch.setattr(
            "quercle_node.execution.HTTPClient",
            lambda api_key, base_url=None: api.client(api_key),
        )
        execute(make_context([SEARCH], host=host))
        assert (LogLevel.WARN, "API key does not start with 'qk_'") in host.logs
        assert not any("legacy" in msg for _, msg in host.logs)


class TestLogging:
    def test_debug_and_summary(self, api: RecordingAPI, host: MockHostBridge) -> None:
        ctx = make_context([SEARCH, {"operation": "nope"}], host=host, continue_on_fail=True)
        execute(ctx, api.client())
        assert (LogLevel.DEBUG, "Item 0: POST /v1/search") in host.logs
        assert (LogLevel.ERROR, "Item 1 failed: Unknown operation: nope") in host.logs
        assert host.logs[-1] == (LogLevel.INFO, "Processed 2 item(s), 1 failed")

    def test_info_level_suppresses_debug(self, api: RecordingAPI, host: MockHostBridge) -> None:
        execute(make_context([SEARCH], host=host, log_level=LogLevel.INFO), api.client())
        assert [lvl for lvl, _ in host.logs] == [LogLevel.INFO]


class TestAsyncExecute:
    def test_same_contract(self) -> None:
        api = RecordingAPI([{"result": "one"}, httpx.Response(500), {"result": "three"}])
        ctx = make_context(_three_items(), {"operation": "search"}, continue_on_fail=True)
        results = asyncio.run(aexecute(ctx, api.client()))
        assert [r.item_index for r in results] == [0, 1, 2]
        assert results[0].json == {"result": "one"}
        assert results[1].is_error
        assert results[2].json == {"result": "three"}

    def test_abort(self) -> None:
        api = RecordingAPI([{"result": "one"}, httpx.Response(500), {"result": "three"}])
        ctx = make_context(_three_items(), {"operation": "search"})
        with pytest.raises(ServerError) as info:
            asyncio.run(aexecute(ctx, api.client()))
        assert len(info.value.partial_results) == 1
        assert len(api.requests) == 2
