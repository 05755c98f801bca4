from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from typing import Any

from ._errors import ConfigurationError

API_KEY_PREFIX = "qk_"
API_KEY_ENV = "QUERCLE_API_KEY"
BASE_URL_ENV = "QUERCLE_BASE_URL"
BASE_URL = "https://api.quercle.dev"

CredentialLookup = Callable[[], Mapping[str, Any] | None]


def _stored_api_key(credential_lookup: CredentialLookup | None) -> str | None:
    if credential_lookup is None:
        return None
    try:
        credentials = credential_lookup()
    except Exception:
        # Credentials not configured, fall through to the environment.
        return None
    if not credentials:
        return None
    value = credentials.get("apiKey")
    return str(value) if value else None


def resolve_api_key(
    credential_lookup: CredentialLookup | None = None,
    env: Mapping[str, str] | None = None,
) -> str:
    """Return the API key from stored credentials, else the environment.

    A failing ``credential_lookup`` counts as "no credential". Raises
    ``ConfigurationError`` when neither source yields a non-empty key.
    """
    env = os.environ if env is None else env
    api_key = _stored_api_key(credential_lookup) or env.get(API_KEY_ENV)
    if not api_key:
        raise ConfigurationError(
            f"No API key provided. Set {API_KEY_ENV} environment variable "
            "or configure Quercle API credentials."
        )
    return api_key


def has_conventional_prefix(api_key: str) -> bool:
    return api_key.startswith(API_KEY_PREFIX)


def resolve_base_url(base_url: str | None = None, env: Mapping[str, str] | None = None) -> str:
    env = os.environ if env is None else env
    url = base_url or env.get(BASE_URL_ENV) or BASE_URL
    url = url.strip().rstrip("/")
    if not url.startswith(("http://", "https://")):
        raise ConfigurationError(
            f"Invalid base URL {url!r}. Set {BASE_URL_ENV} to an http(s) URL "
            "or pass base_url= to the client."
        )
    return url


def bearer_headers(api_key: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }


__all__ = [
    "API_KEY_PREFIX",
    "API_KEY_ENV",
    "BASE_URL_ENV",
    "BASE_URL",
    "CredentialLookup",
    "resolve_api_key",
    "has_conventional_prefix",
    "resolve_base_url",
    "bearer_headers",
]
