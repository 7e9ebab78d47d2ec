"""
Aggregation pipeline: validate filters, apply provider defaults, call the
provider, normalize and persist the results in provider order.
"""
from __future__ import annotations

import logging
import threading
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from news.adapters.base import NewsProvider
from news.errors import NewsError, NormalizationError
from news.models import AggregationResult, ArticleRecord, HealthStatus, ProviderResponse
from news.normalize import normalize_article
from news.schemas import FilterSpec
from news.store import ArticleStore

logger = logging.getLogger(__name__)

DEFAULT_COUNTRY = "us"
DEFAULT_SEARCH_TERM = "technology"

FilterInput = Union[FilterSpec, Mapping[str, Any], None]


class NewsPipeline:
    def __init__(
        self,
        provider: NewsProvider,
        store: ArticleStore,
        *,
        default_country: str = DEFAULT_COUNTRY,
        default_search_term: str = DEFAULT_SEARCH_TERM,
    ) -> None:
        self.provider = provider
        self.store = store
        self.default_country = default_country
        self.default_search_term = default_search_term
        self._health: Dict[str, HealthStatus] = {}
        self._health_lock = threading.Lock()

    def fetch_headlines(self, filters: FilterInput = None, *, cancel: Optional[threading.Event] = None) -> AggregationResult:
        requested = self._ensure_filters(filters)
        resolved = requested
        if not requested.sources and not requested.country:
            resolved = requested.model_copy(update={"country": self.default_country})
        return self._run("top-headlines", self.provider.fetch_top_headlines, requested, resolved, cancel)

    def search_articles(self, filters: FilterInput = None, *, cancel: Optional[threading.Event] = None) -> AggregationResult:
        requested = self._ensure_filters(filters)
        resolved = requested
        if not requested.query and not requested.sources:
            resolved = requested.model_copy(update={"query": self.default_search_term})
        return self._run("everything", self.provider.search_everything, requested, resolved, cancel)

    def list_sources(self, country: Optional[str] = None, category: Optional[str] = None) -> List[Dict[str, Any]]:
        start = time.time()
        try:
            sources = self.provider.list_sources(country or None, category or None)
        except NewsError as exc:
            self._record_health("sources", error=exc.message, start=start)
            raise
        self._record_health("sources", count=len(sources), start=start)
        return sources

    def get_health(self) -> List[HealthStatus]:
        with self._health_lock:
            return list(self._health.values())

    def _run(
        self,
        capability: str,
        call: Callable[[FilterSpec], ProviderResponse],
        requested: FilterSpec,
        resolved: FilterSpec,
        cancel: Optional[threading.Event],
    ) -> AggregationResult:
        start = time.time()
        try:
            response = call(resolved)
        except NewsError as exc:
            # nothing has been written yet, so a failed call leaves the store untouched
            self._record_health(capability, error=exc.message, start=start)
            raise

        articles = self._ingest(response.articles, requested, cancel)
        self._record_health(capability, count=len(articles), start=start)
        status = response.status
        if cancel is not None and cancel.is_set():
            status = "cancelled"
        logger.info(
            "%s: provider reported %s results, stored %s/%s items",
            capability,
            response.total_results,
            len(articles),
            len(response.articles),
        )
        return AggregationResult(status=status, total_results=response.total_results, articles=articles)

    def _ingest(
        self,
        raw_articles: List[Any],
        filters: FilterSpec,
        cancel: Optional[threading.Event],
    ) -> List[ArticleRecord]:
        stored: List[ArticleRecord] = []
        for index, raw in enumerate(raw_articles):
            if cancel is not None and cancel.is_set():
                logger.info("Ingestion cancelled after %s items", len(stored))
                break
            try:
                draft = normalize_article(raw, filters)
            except NormalizationError as exc:
                logger.warning("Skipping provider item #%s: %s", index, exc.message)
                continue
            stored.append(self.store.create(draft))
        return stored

    def _record_health(self, capability: str, *, start: float, count: int = 0, error: Optional[str] = None) -> None:
        name = f"{getattr(self.provider, 'name', 'provider')}:{capability}"
        now = datetime.now(timezone.utc)
        with self._health_lock:
            previous = self._health.get(name)
            self._health[name] = HealthStatus(
                name=name,
                healthy=error is None,
                last_error=error,
                last_success=now if error is None else (previous.last_success if previous else None),
                items_last_fetch=count,
                latency_ms=(time.time() - start) * 1000,
            )

    @staticmethod
    def _ensure_filters(value: FilterInput) -> FilterSpec:
        if isinstance(value, FilterSpec):
            return value
        return FilterSpec.from_params(value or {})
