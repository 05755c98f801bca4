from __future__ import annotations

from typing import Any

from . import host as _host_module
from ._auth import API_KEY_ENV, resolve_api_key
from ._types import Item, LogLevel
from .host import HostBridge

CREDENTIAL_NAME = "quercleApi"


class Context:
    """Execution context for one batch: items, per-item parameters, credentials and logging."""

    def __init__(
        self,
        items: list[Item],
        parameters: dict[str, Any] | None = None,
        *,
        continue_on_fail: bool = False,
        log_level: int = LogLevel.INFO,
        node_name: str = "Quercle",
        host: HostBridge | None = None,
    ) -> None:
        self._items = items
        self._parameters = dict(parameters or {})
        self._continue_on_fail = continue_on_fail
        self._log_level = log_level
        self._node_name = node_name
        self._host = host or _host_module.get_host()

    @classmethod
    def from_dict(cls, data: dict[str, Any], host: HostBridge | None = None) -> Context:
        return cls(
            items=[Item.from_dict(i) for i in data.get("items", [])],
            parameters=data.get("parameters", {}),
            continue_on_fail=data.get("continue_on_fail", False),
            log_level=data.get("log_level", LogLevel.INFO),
            node_name=data.get("node_name", "Quercle"),
            host=host,
        )

    @property
    def items(self) -> list[Item]:
        return self._items

    @property
    def node_name(self) -> str:
        return self._node_name

    @property
    def log_level(self) -> int:
        return self._log_level

    def continue_on_fail(self) -> bool:
        return self._continue_on_fail

    def get_parameter(self, name: str, index: int, default: Any = None) -> Any:
        """Return a parameter for item ``index``, honouring per-item overrides."""
        overrides = self._items[index].parameters
        if name in overrides:
            return overrides[name]
        return self._parameters.get(name, default)

    def get_item_parameters(self, index: int) -> dict[str, Any]:
        return {**self._parameters, **self._items[index].parameters}

    def get_env(self, name: str) -> str | None:
        return self._host.get_env(name)

    def get_credentials(self, name: str = CREDENTIAL_NAME) -> dict[str, Any]:
        return self._host.get_credentials(name)

    def resolve_api_key(self) -> str:
        env_key = self.get_env(API_KEY_ENV)
        env = {API_KEY_ENV: env_key} if env_key else {}
        return resolve_api_key(self.get_credentials, env)

    def debug(self, message: str) -> None:
        if self._log_level <= LogLevel.DEBUG:
            self._host.log(LogLevel.DEBUG, message)

    def info(self, message: str) -> None:
        if self._log_level <= LogLevel.INFO:
            self._host.log(LogLevel.INFO, message)

    def warn(self, message: str) -> None:
        if self._log_level <= LogLevel.WARN:
            self._host.log(LogLevel.WARN, message)

    def error(self, message: str) -> None:
        if self._log_level <= LogLevel.ERROR:
            self._host.log(LogLevel.ERROR, message)


__all__ = ["Context", "CREDENTIAL_NAME"]
