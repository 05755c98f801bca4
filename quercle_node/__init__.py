from __future__ import annotations

from quercle_node._auth import API_KEY_ENV, BASE_URL, BASE_URL_ENV, resolve_api_key, resolve_base_url
from quercle_node._errors import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    OperationError,
    QuercleError,
    RateLimitError,
    ResponseFormatError,
    ServerError,
    TransportError,
)
from quercle_node._http import DEFAULT_TIMEOUT, HTTPClient
from quercle_node._types import (
    DomainFilter,
    FetchRequest,
    Item,
    LogLevel,
    Operation,
    PreparedRequest,
    ResultItem,
    SearchRequest,
)
from quercle_node.context import Context
from quercle_node.credentials import QuercleApiCredential, verify_credential
from quercle_node.execution import aexecute, execute
from quercle_node.host import HostBridge, MockHostBridge, get_host, set_host
from quercle_node.mapping import build_request, parse_domains
from quercle_node.node import arun, get_description, run

__version__ = "0.1.0"

__all__ = [
    "API_KEY_ENV",
    "BASE_URL",
    "BASE_URL_ENV",
    "DEFAULT_TIMEOUT",
    "resolve_api_key",
    "resolve_base_url",
    "QuercleError",
    "ConfigurationError",
    "OperationError",
    "TransportError",
    "APIError",
    "AuthenticationError",
    "RateLimitError",
    "ServerError",
    "ResponseFormatError",
    "HTTPClient",
    "LogLevel",
    "Operation",
    "DomainFilter",
    "SearchRequest",
    "FetchRequest",
    "PreparedRequest",
    "Item",
    "ResultItem",
    "Context",
    "HostBridge",
    "MockHostBridge",
    "set_host",
    "get_host",
    "build_request",
    "parse_domains",
    "execute",
    "aexecute",
    "get_description",
    "run",
    "arun",
    "QuercleApiCredential",
    "verify_credential",
]
