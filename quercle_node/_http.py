"""HTTP transport for the Quercle API.

Provides synchronous and asynchronous POST helpers with bearer
authentication, typed status errors and ``{"result": ...}`` validation.
"""

from __future__ import annotations

from typing import Any

import httpx

from ._auth import bearer_headers, resolve_base_url
from ._errors import (
    APIError,
    AuthenticationError,
    RateLimitError,
    ResponseFormatError,
    ServerError,
    TransportError,
)

DEFAULT_TIMEOUT = 30.0


class HTTPClient:
    """Thin wrapper around ``httpx`` for sync and async API calls."""

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
        async_transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialise the HTTP client.

        Args:
            api_key: Resolved Quercle API key, sent as a bearer token.
            base_url: Override for the API base URL.
            timeout: Default request timeout in seconds.
            transport: Custom sync transport, mainly for tests.
            async_transport: Custom async transport, mainly for tests.
        """
        self._base_url = resolve_base_url(base_url)
        self._headers = bearer_headers(api_key)
        self._timeout = timeout
        self._transport = transport
        self._async_transport = async_transport
        self._client: httpx.Client | None = None
        self._async_client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    def _get_client(self) -> httpx.Client:
        """Return the lazily-initialised synchronous HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self._base_url,
                headers=self._headers,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    def _get_async_client(self) -> httpx.AsyncClient:
        """Return the lazily-initialised asynchronous HTTP client."""
        if self._async_client is None:
            self._async_client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=self._headers,
                timeout=self._timeout,
                transport=self._async_transport,
            )
        return self._async_client

    def close(self) -> None:
        """Close the synchronous transport."""
        if self._client is not None:
            self._client.close()
            self._client = None

    async def aclose(self) -> None:
        """Async close of underlying transports."""
        self.close()
        if self._async_client is not None:
            await self._async_client.aclose()
            self._async_client = None

    def __enter__(self) -> HTTPClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    async def __aenter__(self) -> HTTPClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        """Raise a typed ``APIError`` for non-success HTTP responses."""
        if response.is_success:
            return
        body = response.text
        msg = f"{response.reason_phrase}: {body}"
        if response.status_code in (401, 403):
            raise AuthenticationError(response.status_code, msg, body)
        if response.status_code == 429:
            raise RateLimitError(response.status_code, msg, body)
        if response.status_code >= 500:
            raise ServerError(response.status_code, msg, body)
        raise APIError(response.status_code, msg, body)

    @staticmethod
    def _extract_result(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError as exc:
            raise ResponseFormatError("Response body is not valid JSON", response.text) from exc
        if not isinstance(data, dict):
            raise ResponseFormatError("Response body is not a JSON object", data)
        result = data.get("result")
        if not isinstance(result, str):
            raise ResponseFormatError("Response is missing a string 'result' field", data)
        return result

    def post(self, path: str, body: dict[str, Any]) -> httpx.Response:
        """Send a synchronous JSON POST.

        Raises:
            TransportError: When the request fails before a response arrives.
            APIError: On any non-success status code.
        """
        client = self._get_client()
        try:
            response = client.post(path, json=body)
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to {path} failed: {exc}") from exc
        self._raise_for_status(response)
        return response

    async def apost(self, path: str, body: dict[str, Any]) -> httpx.Response:
        """Send an asynchronous JSON POST.

        Raises:
            TransportError: When the request fails before a response arrives.
            APIError: On any non-success status code.
        """
        client = self._get_async_client()
        try:
            response = await client.post(path, json=body)
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to {path} failed: {exc}") from exc
        self._raise_for_status(response)
        return response

    def post_result(self, path: str, body: dict[str, Any]) -> str:
        return self._extract_result(self.post(path, body))

    async def apost_result(self, path: str, body: dict[str, Any]) -> str:
        return self._extract_result(await self.apost(path, body))


__all__ = ["HTTPClient", "DEFAULT_TIMEOUT"]
