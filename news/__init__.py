"""
Public API of the news aggregation + summarization core.

``build_services`` wires one store into the pipeline and the orchestrator;
callers (the Flask app, tests) own the returned container.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from news.adapters.base import NewsProvider
from news.adapters.news_service import NewsServiceAdapter
from news.engines import SummarizationEngine, create_engine
from news.models import SortBy, TopicSummaryResult
from news.pipeline import NewsPipeline
from news.schemas import FilterSpec
from news.settings import NewsSettings, load_settings
from news.store import ArticleStore
from news.summarize import SummaryOrchestrator


@dataclass
class NewsServices:
    settings: NewsSettings
    store: ArticleStore
    pipeline: NewsPipeline
    summarizer: SummaryOrchestrator

    def topic_summary(self, topic: str, max_articles: Optional[int] = None) -> TopicSummaryResult:
        """Search the provider for ``topic`` (newest first) and synthesize one summary with citations."""
        filters = FilterSpec(
            query=topic,
            sort_by=SortBy.PUBLISHED_AT,
            page_size=max_articles or self.settings.topic_fetch_size,
        )
        result = self.pipeline.search_articles(filters)
        return self.summarizer.summarize_batch(topic, result.articles)


def build_services(
    settings: Optional[NewsSettings] = None,
    *,
    provider: Optional[NewsProvider] = None,
    engine: Optional[SummarizationEngine] = None,
    store: Optional[ArticleStore] = None,
) -> NewsServices:
    settings = settings if settings is not None else load_settings()
    store = store if store is not None else ArticleStore()
    if provider is None:
        provider = NewsServiceAdapter(
            api_key=settings.news_api_key,
            base_url=settings.news_api_base_url,
            timeout=settings.provider_timeout,
            max_retries=settings.provider_retries,
            rate_limit_seconds=settings.provider_min_interval,
        )
    engine = engine if engine is not None else create_engine(settings)
    pipeline = NewsPipeline(
        provider,
        store,
        default_country=settings.default_country,
        default_search_term=settings.default_search_term,
    )
    summarizer = SummaryOrchestrator(
        engine,
        store,
        timeout=settings.summary_timeout,
        max_workers=settings.summary_workers,
        max_topic_articles=settings.topic_max_articles,
        excerpt_chars=settings.topic_excerpt_chars,
    )
    return NewsServices(settings=settings, store=store, pipeline=pipeline, summarizer=summarizer)


__all__ = ["NewsServices", "build_services", "FilterSpec", "NewsSettings", "load_settings"]
