"""
Adapter that talks to a NewsAPI-compatible REST provider.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from news.errors import ProviderError
from news.http_client import HttpClient
from news.models import ProviderResponse
from news.rate_limiter import RateLimiter
from news.schemas import FilterSpec

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://newsapi.org/v2"


class NewsServiceAdapter:
    """
    Thin wrapper around ``/top-headlines``, ``/everything`` and ``/sources``.

    Parameters are sent exactly as resolved by the caller; default policies
    (fallback country/query) belong to the pipeline.
    """

    name = "news-service"

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10,
        max_retries: int = 0,
        rate_limit_seconds: float = 0.0,
        http: Optional[HttpClient] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.http = http or HttpClient(timeout=timeout, max_retries=max_retries)
        self.rate_limiter = rate_limiter or RateLimiter()
        self.rate_limiter.configure(self.name, rate_limit_seconds)

    def fetch_top_headlines(self, filters: FilterSpec) -> ProviderResponse:
        params: Dict[str, Any] = {}
        if filters.country:
            params["country"] = filters.country
        if filters.category:
            params["category"] = filters.category
        if filters.sources:
            params["sources"] = ",".join(filters.sources)
        if filters.query:
            params["q"] = filters.query
        params["pageSize"] = filters.page_size
        params["page"] = filters.page
        return self._articles("top-headlines", params)

    def search_everything(self, filters: FilterSpec) -> ProviderResponse:
        params: Dict[str, Any] = {}
        if filters.query:
            params["q"] = filters.query
        if filters.sources:
            params["sources"] = ",".join(filters.sources)
        if filters.from_date:
            params["from"] = filters.from_date
        if filters.to_date:
            params["to"] = filters.to_date
        if filters.sort_by:
            params["sortBy"] = filters.sort_by.value
        params["pageSize"] = filters.page_size
        params["page"] = filters.page
        return self._articles("everything", params)

    def list_sources(self, country: Optional[str] = None, category: Optional[str] = None) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {}
        if country:
            params["country"] = country
        if category:
            params["category"] = category
        payload = self._call("sources", params)
        sources = payload.get("sources") or []
        if not isinstance(sources, list):
            raise ProviderError("Provider returned malformed sources list")
        return [source for source in sources if isinstance(source, dict)]

    def _articles(self, endpoint: str, params: Dict[str, Any]) -> ProviderResponse:
        payload = self._call(endpoint, params)
        articles = payload.get("articles") or []
        if not isinstance(articles, list):
            raise ProviderError("Provider returned malformed articles list")
        try:
            total = int(payload.get("totalResults") or 0)
        except (TypeError, ValueError):
            total = len(articles)
        return ProviderResponse(status=str(payload.get("status", "ok")), total_results=total, articles=articles)

    def _call(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise ProviderError("News provider API key missing (set NEWS_API_KEY)", status=401)
        self.rate_limiter.wait(self.name)
        url = f"{self.base_url}/{endpoint}"
        logger.debug("GET %s params=%s", url, params)
        payload = self.http.get(url, params=params, headers={"X-Api-Key": self.api_key})
        if payload.get("status") == "error":
            # NewsAPI reports some failures as 200 + {"status": "error"}
            raise ProviderError(
                f"News API error ({payload.get('code', 'unknown')}): {payload.get('message', '')}".strip()
            )
        return payload
