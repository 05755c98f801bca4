from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any


class LogLevel(IntEnum):
    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4


class Operation(str, Enum):
    SEARCH = "search"
    FETCH = "fetch"


class DomainFilter(str, Enum):
    NONE = "none"
    ALLOWED = "allowed"
    BLOCKED = "blocked"


@dataclass
class SearchRequest:
    query: str
    domain_filter: DomainFilter = DomainFilter.NONE
    domains: list[str] = field(default_factory=list)

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"query": self.query}
        if self.domain_filter is DomainFilter.ALLOWED:
            body["allowed_domains"] = list(self.domains)
        elif self.domain_filter is DomainFilter.BLOCKED:
            body["blocked_domains"] = list(self.domains)
        return body


@dataclass
class FetchRequest:
    url: str
    prompt: str

    def to_body(self) -> dict[str, Any]:
        return {"url": self.url, "prompt": self.prompt}


@dataclass
class PreparedRequest:
    endpoint: str
    body: dict[str, Any] = field(default_factory=dict)


@dataclass
class Item:
    json: dict[str, Any] = field(default_factory=dict)
    parameters: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Item:
        return cls(
            json=data.get("json", {}),
            parameters=data.get("parameters", {}),
        )


@dataclass
class ResultItem:
    json: dict[str, Any]
    paired_item: dict[str, int]

    @classmethod
    def ok(cls, result: str, index: int) -> ResultItem:
        return cls(json={"result": result}, paired_item={"item": index})

    @classmethod
    def fail(cls, message: str, index: int) -> ResultItem:
        return cls(json={"error": message}, paired_item={"item": index})

    @property
    def item_index(self) -> int:
        return self.paired_item["item"]

    @property
    def is_error(self) -> bool:
        return "error" in self.json

    def to_dict(self) -> dict[str, Any]:
        return {"json": self.json, "pairedItem": self.paired_item}


__all__ = [
    "LogLevel",
    "Operation",
    "DomainFilter",
    "SearchRequest",
    "FetchRequest",
    "PreparedRequest",
    "Item",
    "ResultItem",
]
