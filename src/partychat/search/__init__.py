"""Web search gateway."""

from __future__ import annotations

from partychat.search.gateway import MAX_RESULTS, SearchGateway, TavilySearchGateway, get_search_gateway

__all__ = [
    "MAX_RESULTS",
    "SearchGateway",
    "TavilySearchGateway",
    "get_search_gateway",
]
