"""Quercle workflow node: AI-powered web search and fetch."""

from __future__ import annotations

from typing import Any

from ._types import DomainFilter, Operation, ResultItem
from .context import CREDENTIAL_NAME, Context
from .execution import aexecute, execute
from .schema import CredentialRef, NodeDescription, NodeProperty, PropertyOption

TOOL_DESCRIPTIONS = {
    "SEARCH": (
        "Search the web and get an AI-synthesized answer with citations. The response "
        "includes the answer and source URLs that can be fetched for further investigation. "
        "Optionally filter by allowed or blocked domains."
    ),
    "FETCH": (
        "Fetch a web page and analyze its content using AI. Provide a URL and a prompt "
        "describing what information you want to extract or how to analyze the content. "
        "The raw HTML is NOT returned - only the AI's analysis based on your prompt."
    ),
}

FIELD_DESCRIPTIONS = {
    "SEARCH_QUERY": "The search query to find information about. Be specific",
    "FETCH_URL": "The URL to fetch and analyze",
    "FETCH_PROMPT": (
        "Instructions for how to analyze the page content. "
        "Be specific about what information you want to extract"
    ),
    "ALLOWED_DOMAINS": "Only include results from these domains (e.g., 'example.com, *.example.org')",
}

_SEARCH = [Operation.SEARCH.value]
_FETCH = [Operation.FETCH.value]


def get_description() -> NodeDescription:
    """Describe the node's operations and the fields each one shows."""
    nd = NodeDescription(
        display_name="Quercle",
        name="quercle",
        description="AI-powered web search and fetch",
        icon="file:quercle.svg",
        subtitle='={{$parameter["operation"]}}',
        defaults={"name": "Quercle"},
    )
    nd.add_credential(CredentialRef(CREDENTIAL_NAME, required=False))

    nd.add_property(
        NodeProperty.select(
            "operation",
            "Operation",
            [
                PropertyOption(
                    "Search",
                    Operation.SEARCH.value,
                    TOOL_DESCRIPTIONS["SEARCH"],
                    "Perform AI powered web search",
                ),
                PropertyOption(
                    "Fetch",
                    Operation.FETCH.value,
                    TOOL_DESCRIPTIONS["FETCH"],
                    "Fetch and process content from a URL",
                ),
            ],
            default=Operation.SEARCH.value,
        ).without_expressions()
    )

    nd.add_property(
        NodeProperty.string(
            "query", "Query", description=FIELD_DESCRIPTIONS["SEARCH_QUERY"], required=True
        ).shown_when(operation=_SEARCH)
    )
    nd.add_property(
        NodeProperty.select(
            "domainFilter",
            "Domain Filter",
            [
                PropertyOption("None", DomainFilter.NONE.value),
                PropertyOption("Allowed Domains", DomainFilter.ALLOWED.value),
                PropertyOption("Blocked Domains", DomainFilter.BLOCKED.value),
            ],
            default=DomainFilter.NONE.value,
            description="Filter search results by domain",
        ).shown_when(operation=_SEARCH)
    )
    nd.add_property(
        NodeProperty.string("domains", "Domains", description=FIELD_DESCRIPTIONS["ALLOWED_DOMAINS"])
        .shown_when(
            operation=_SEARCH,
            domainFilter=[DomainFilter.ALLOWED.value, DomainFilter.BLOCKED.value],
        )
        .with_placeholder("example.com, another.com")
    )

    nd.add_property(
        NodeProperty.string("url", "URL", description=FIELD_DESCRIPTIONS["FETCH_URL"], required=True)
        .shown_when(operation=_FETCH)
        .with_placeholder("https://example.com/page")
    )
    nd.add_property(
        NodeProperty.string(
            "prompt", "Prompt", description=FIELD_DESCRIPTIONS["FETCH_PROMPT"], required=True
        )
        .shown_when(operation=_FETCH)
        .with_type_options(rows=4)
        .with_placeholder("Extract the main article content and summarize it")
    )
    return nd


def _to_output(results: list[ResultItem]) -> list[list[dict[str, Any]]]:
    return [[r.to_dict() for r in results]]


def run(ctx: Context) -> list[list[dict[str, Any]]]:
    """Execute the node and return items for its single ``main`` output."""
    return _to_output(execute(ctx))


async def arun(ctx: Context) -> list[list[dict[str, Any]]]:
    return _to_output(await aexecute(ctx))


__all__ = ["TOOL_DESCRIPTIONS", "FIELD_DESCRIPTIONS", "get_description", "run", "arun"]
