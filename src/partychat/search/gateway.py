"""Web search gateway backed by the Tavily API."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from partychat.config import Settings
from partychat.errors import INVALID_QUERY, MISSING_TAVILY_KEY, ConfigurationError, SearchError, ValidationError
from partychat.logging import get_logger
from partychat.models.search import SearchResult

logger = get_logger(__name__)

MAX_RESULTS = 5


class SearchGateway(Protocol):
    """Search gateway interface."""

    def search(self, query: str) -> list[SearchResult]:
        """Return at most `MAX_RESULTS` ranked results."""

    def search_raw(self, query: str) -> dict[str, Any]:
        """Return the provider payload unmodified."""


@dataclass(frozen=True)
class TavilySearchGateway:
    """Tavily API search gateway.

    Notes:
        - The API key is read from settings (`TAVILY_API_KEY`) and checked on every call, so the
          service can start without it and report the missing credential per request.
        - One attempt per call. Any non-success status is a `SearchError`.
    """

    api_key: str | None
    base_url: str = "https://api.tavily.com"
    timeout_s: float = 30.0
    max_results: int = MAX_RESULTS
    transport: httpx.BaseTransport | None = None

    def search_raw(self, query: str) -> dict[str, Any]:
        """Search using Tavily and return the JSON payload as-is.

        Args:
            query: Search query.

        Returns:
            Provider payload.
        """

        if not self.api_key:
            raise ConfigurationError(MISSING_TAVILY_KEY)
        if not query or not query.strip():
            raise ValidationError(INVALID_QUERY)

        url = f"{self.base_url.rstrip('/')}/search"
        payload = {
            "api_key": self.api_key,
            "query": query,
            "max_results": self.max_results,
        }

        started = time.monotonic()
        try:
            with httpx.Client(
                timeout=httpx.Timeout(self.timeout_s),
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                resp = client.post(url, json=payload)
        except httpx.HTTPError as e:
            logger.error(
                "Tavily request failed",
                extra={"query_len": len(query), "error_type": type(e).__name__, "error": str(e)},
            )
            raise SearchError(f"Search request failed: {type(e).__name__}") from e

        if not resp.is_success:
            logger.error(
                "Tavily error response",
                extra={
                    "query_len": len(query),
                    "status_code": resp.status_code,
                    "body": resp.text[:500],
                },
            )
            raise SearchError(f"Search error {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise SearchError("Search response is not JSON") from e
        if not isinstance(data, dict):
            raise SearchError("Search response not a JSON object")

        logger.info(
            "Tavily search ok",
            extra={
                "query_len": len(query),
                "status_code": resp.status_code,
                "latency_ms": int((time.monotonic() - started) * 1000),
            },
        )
        return data

    def search(self, query: str) -> list[SearchResult]:
        """Search using Tavily.

        Args:
            query: Search query.

        Returns:
            Up to `max_results` results in provider order.
        """

        data = self.search_raw(query)
        raw_results = data.get("results") or []
        if not isinstance(raw_results, list):
            raise SearchError("Search response results is not a list")

        results = [_to_result(item) for item in raw_results[: self.max_results]]
        logger.info("Search results parsed", extra={"result_count": len(results)})
        return results


def _to_result(item: Any) -> SearchResult:
    if not isinstance(item, dict):
        raise SearchError("Search result item is not an object")
    return SearchResult(
        url=str(item.get("url") or ""),
        title=str(item.get("title") or ""),
        snippet=str(item.get("content") or item.get("snippet") or ""),
    )


def get_search_gateway(settings: Settings, *, transport: httpx.BaseTransport | None = None) -> SearchGateway:
    """Factory to create the search gateway from settings."""

    return TavilySearchGateway(
        api_key=settings.tavily_api_key,
        base_url=settings.tavily_api_base_url,
        timeout_s=settings.search_timeout_s,
        transport=transport,
    )
