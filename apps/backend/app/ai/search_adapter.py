"""
SearchAdapter — Web search via the Google Custom Search JSON API.

Used by the investigation agent to fact-check the title and probe the
channel's reputation.

Graceful degradation: if GOOGLE_SEARCH_API_KEY or GOOGLE_SEARCH_ENGINE_ID is
not set, the adapter reports enabled=False and the investigation step is
skipped entirely. Search errors never propagate; they come back as [].
"""

import logging
from dataclasses import dataclass

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)

CUSTOM_SEARCH_URL = "https://www.googleapis.com/customsearch/v1"
MAX_RESULTS = 5


@dataclass(frozen=True)
class SearchResult:
    title: str
    snippet: str = ""
    link: str = ""


class SearchAdapter:
    """
    Thin async wrapper around the Custom Search REST API.

    Returns organic results with title, link and snippet, restricted to
    settings.search_language.
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(settings.google_search_api_key and settings.google_search_engine_id)

    async def search(self, query: str, num_results: int = MAX_RESULTS) -> list[SearchResult]:
        """
        Run one search.

        Returns:
            Up to *num_results* (max 5) results, or [] if not configured or on any error.
        """
        if not self.enabled:
            return []

        params = {
            "key": settings.google_search_api_key,
            "cx": settings.google_search_engine_id,
            "q": query,
            "num": min(num_results, MAX_RESULTS),
        }
        if settings.search_language:
            params["lr"] = settings.search_language

        async with httpx.AsyncClient(
            timeout=settings.search_timeout_seconds, transport=self._transport
        ) as client:
            try:
                response = await client.get(CUSTOM_SEARCH_URL, params=params)
                response.raise_for_status()
                items = response.json().get("items", [])
            except httpx.HTTPStatusError as exc:
                logger.error(
                    "Custom Search API error: %s — %s",
                    exc.response.status_code,
                    exc.response.text[:200],
                )
                return []
            except Exception as exc:
                logger.error("Custom Search request failed: %s", exc)
                return []

        results = [
            SearchResult(
                title=item.get("title", ""),
                snippet=item.get("snippet", ""),
                link=item.get("link", ""),
            )
            for item in items[:MAX_RESULTS]
        ]
        logger.debug("Search %.60r → %d results", query, len(results))
        return results


# Module-level singleton
search_adapter = SearchAdapter()
