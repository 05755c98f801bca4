from __future__ import annotations

import os
from typing import Any

from ._errors import ConfigurationError


class HostBridge:
    """Interface to the workflow runtime. Replaced at runtime by the host's implementation."""

    def log(self, level: int, message: str) -> None:
        pass

    def get_credentials(self, name: str) -> dict[str, Any]:
        raise ConfigurationError(f"Credentials '{name}' are not configured")

    def get_env(self, name: str) -> str | None:
        return os.environ.get(name)


class MockHostBridge(HostBridge):
    """Host bridge for local testing with captured logs and in-memory credentials."""

    def __init__(
        self,
        credentials: dict[str, dict[str, Any]] | None = None,
        env: dict[str, str] | None = None,
    ) -> None:
        self.logs: list[tuple[int, str]] = []
        self.credentials: dict[str, dict[str, Any]] = dict(credentials or {})
        self.env: dict[str, str] = dict(env or {})
        self.credential_requests: list[str] = []

    def log(self, level: int, message: str) -> None:
        self.logs.append((level, message))

    def get_credentials(self, name: str) -> dict[str, Any]:
        self.credential_requests.append(name)
        if name not in self.credentials:
            return super().get_credentials(name)
        return self.credentials[name]

    def get_env(self, name: str) -> str | None:
        return self.env.get(name)


_host: HostBridge = HostBridge()


def set_host(host: HostBridge) -> None:
    global _host
    _host = host


def get_host() -> HostBridge:
    return _host


__all__ = ["HostBridge", "MockHostBridge", "set_host", "get_host"]
