from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ._auth import API_KEY_ENV, BASE_URL
from ._errors import QuercleError
from ._http import HTTPClient
from .context import CREDENTIAL_NAME
from .mapping import SEARCH_PATH
from .schema import NodeProperty

TEST_QUERY = "test"


@dataclass
class CredentialTestRequest:
    base_url: str
    url: str
    method: str = "POST"
    body: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "request": {
                "baseURL": self.base_url,
                "url": self.url,
                "method": self.method,
                "body": self.body,
            }
        }


@dataclass
class QuercleApiCredential:
    """Credential definition for the Quercle API (a single bearer API key)."""

    name: str = CREDENTIAL_NAME
    display_name: str = "Quercle API"
    documentation_url: str = "https://quercle.dev/docs"
    properties: list[NodeProperty] = field(
        default_factory=lambda: [
            NodeProperty.string(
                "apiKey",
                "API Key",
                description=(
                    "Your Quercle API key (starts with qk_). "
                    f"Can also be set via {API_KEY_ENV} environment variable."
                ),
                required=True,
            ).with_type_options(password=True)
        ]
    )
    authenticate: dict[str, Any] = field(
        default_factory=lambda: {
            "type": "generic",
            "properties": {
                "headers": {"Authorization": "=Bearer {{$credentials.apiKey}}"},
            },
        }
    )
    test_request: CredentialTestRequest = field(
        default_factory=lambda: CredentialTestRequest(
            base_url=BASE_URL, url=SEARCH_PATH, body={"query": TEST_QUERY}
        )
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "displayName": self.display_name,
            "documentationUrl": self.documentation_url,
            "properties": [p.to_dict() for p in self.properties],
            "authenticate": self.authenticate,
            "test": self.test_request.to_dict(),
        }


def verify_credential(api_key: str, client: HTTPClient | None = None) -> bool:
    """Probe the search endpoint with ``api_key``; True on a success status."""
    owned = client is None
    if client is None:
        client = HTTPClient(api_key)
    probe = QuercleApiCredential().test_request
    try:
        client.post(probe.url, probe.body)
    except QuercleError:
        return False
    finally:
        if owned:
            client.close()
    return True


__all__ = ["CredentialTestRequest", "QuercleApiCredential", "verify_credential"]
