"""Per-item execution of the Quercle node.

Each input item is mapped to exactly one POST against the Quercle API.
Items run strictly in order; output ``i`` is always paired with input ``i``.
"""

from __future__ import annotations

from ._auth import API_KEY_PREFIX, BASE_URL_ENV, has_conventional_prefix, resolve_base_url
from ._errors import OperationError
from ._http import HTTPClient
from ._types import PreparedRequest, ResultItem
from .context import Context
from .mapping import build_request


def _prepare(ctx: Context, index: int) -> PreparedRequest:
    params = ctx.get_item_parameters(index)
    operation = params.get("operation", "search")
    try:
        prepared = build_request(operation, params)
    except OperationError as exc:
        exc.item_index = index
        raise
    ctx.debug(f"Item {index}: POST {prepared.endpoint}")
    return prepared


def _handle_failure(ctx: Context, exc: Exception, index: int, results: list[ResultItem]) -> None:
    if ctx.continue_on_fail():
        ctx.error(f"Item {index} failed: {exc}")
        results.append(ResultItem.fail(str(exc), index))
        return
    exc.partial_results = list(results)  # type: ignore[attr-defined]
    raise exc


def _open_client(ctx: Context, base_url: str | None) -> HTTPClient:
    api_key = ctx.resolve_api_key()
    if not has_conventional_prefix(api_key):
        ctx.warn(f"API key does not start with '{API_KEY_PREFIX}'")
    env_url = ctx.get_env(BASE_URL_ENV)
    base_url = resolve_base_url(base_url, env={BASE_URL_ENV: env_url} if env_url else {})
    return HTTPClient(api_key, base_url=base_url)


def _summarise(ctx: Context, results: list[ResultItem]) -> None:
    failed = sum(1 for r in results if r.is_error)
    ctx.info(f"Processed {len(results)} item(s), {failed} failed")


def execute(
    ctx: Context,
    client: HTTPClient | None = None,
    base_url: str | None = None,
) -> list[ResultItem]:
    """Run every item in ``ctx`` and return the paired results.

    The API key is resolved once, before any request, unless ``client`` is
    given. Per-item failures are captured as ``{"error": ...}`` results when
    the context continues on failure, otherwise the first one is re-raised
    with the results so far attached as ``partial_results``.

    Raises:
        ConfigurationError: When no API key is available.
    """
    owned = client is None
    if client is None:
        client = _open_client(ctx, base_url)
    results: list[ResultItem] = []
    try:
        for index in range(len(ctx.items)):
            try:
                prepared = _prepare(ctx, index)
                result = client.post_result(prepared.endpoint, prepared.body)
            except Exception as exc:
                _handle_failure(ctx, exc, index, results)
                continue
            results.append(ResultItem.ok(result, index))
    finally:
        if owned:
            client.close()
    _summarise(ctx, results)
    return results


async def aexecute(
    ctx: Context,
    client: HTTPClient | None = None,
    base_url: str | None = None,
) -> list[ResultItem]:
    """Async variant of :func:`execute`; requests are awaited one at a time."""
    owned = client is None
    if client is None:
        client = _open_client(ctx, base_url)
    results: list[ResultItem] = []
    try:
        for index in range(len(ctx.items)):
            try:
                prepared = _prepare(ctx, index)
                result = await client.apost_result(prepared.endpoint, prepared.body)
            except Exception as exc:
                _handle_failure(ctx, exc, index, results)
                continue
            results.append(ResultItem.ok(result, index))
    finally:
        if owned:
            await client.aclose()
    _summarise(ctx, results)
    return results


__all__ = ["execute", "aexecute"]
