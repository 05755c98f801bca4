"""Map node parameters to Quercle API requests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ._errors import OperationError
from ._types import DomainFilter, FetchRequest, Operation, PreparedRequest, SearchRequest

SEARCH_PATH = "/v1/search"
FETCH_PATH = "/v1/fetch"

ENDPOINTS = {
    Operation.SEARCH: SEARCH_PATH,
    Operation.FETCH: FETCH_PATH,
}


def parse_domains(raw: str | None) -> list[str]:
    """Split a comma-separated domain list, trimming and dropping blanks.

    Order is preserved and duplicates are kept. Raises ``OperationError``
    when ``raw`` is not a string.
    """
    if raw is None or raw == "":
        return []
    if not isinstance(raw, str):
        raise OperationError("Parameter 'domains' must be a comma-separated string")
    return [d.strip() for d in raw.split(",") if d.strip()]


def parse_operation(value: Any) -> Operation:
    try:
        return Operation(value)
    except ValueError:
        raise OperationError(f"Unknown operation: {value}") from None


def _parse_domain_filter(value: Any) -> DomainFilter:
    if value is None:
        return DomainFilter.NONE
    try:
        return DomainFilter(value)
    except ValueError:
        raise OperationError(f"Unknown domain filter: {value}") from None


def _require_string(params: Mapping[str, Any], name: str) -> str:
    value = params.get(name)
    if value is None or str(value) == "":
        raise OperationError(f"Required parameter '{name}' not provided")
    return str(value)


def search_request(params: Mapping[str, Any]) -> SearchRequest:
    query = _require_string(params, "query")
    domain_filter = _parse_domain_filter(params.get("domainFilter"))
    domains: list[str] = []
    if domain_filter is not DomainFilter.NONE:
        domains = parse_domains(params.get("domains"))
    return SearchRequest(query=query, domain_filter=domain_filter, domains=domains)


def fetch_request(params: Mapping[str, Any]) -> FetchRequest:
    return FetchRequest(
        url=_require_string(params, "url"),
        prompt=_require_string(params, "prompt"),
    )


def build_request(operation: Operation | str, params: Mapping[str, Any]) -> PreparedRequest:
    """Build the endpoint and JSON body for one item.

    Raises ``OperationError`` for an unknown operation or domain filter and
    for a missing required field.
    """
    op = parse_operation(operation)
    if op is Operation.SEARCH:
        body = search_request(params).to_body()
    else:
        body = fetch_request(params).to_body()
    return PreparedRequest(endpoint=ENDPOINTS[op], body=body)


__all__ = [
    "SEARCH_PATH",
    "FETCH_PATH",
    "parse_domains",
    "parse_operation",
    "search_request",
    "fetch_request",
    "build_request",
]
