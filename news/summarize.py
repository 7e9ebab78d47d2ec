"""
Summarization orchestrator.

The engine is best-effort: every operation here returns usable text. Engine
failures, timeouts and empty answers are absorbed into fixed fallback text and
reported through ``SummaryOutcome.degraded`` / ``reason``.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeout
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, Tuple

from news.engines.base import SummarizationEngine
from news.errors import EngineError, NotFound
from news.models import (
    ArticleRecord,
    SentimentResult,
    SourceLink,
    SummaryLength,
    SummaryOutcome,
    TopicSummaryResult,
)
from news.normalize import UNKNOWN_SOURCE
from news.parsing import parse_sentiment_response
from news.schemas import SummaryArticleInput
from news.store import ArticleStore

logger = logging.getLogger(__name__)

FALLBACK_SUMMARY = "Summary unavailable due to processing error"
TOPIC_FALLBACK_SUMMARY = (
    "A combined summary could not be generated right now. "
    "The source articles listed below are still available for reading."
)
NO_CONTENT = "No content available"
DEFAULT_SENTIMENT = (3, 0.5)

LENGTH_INSTRUCTIONS = {
    SummaryLength.SHORT: "Summarize in 1-2 concise sentences",
    SummaryLength.MEDIUM: "Summarize in 3-4 sentences with key details",
    SummaryLength.LONG: "Summarize in 5-6 sentences with comprehensive details",
}

SENTIMENT_PROMPT = (
    "You are a sentiment analysis expert. Analyze the sentiment of the text and provide "
    "a rating from 1 to 5 stars and a confidence score between 0 and 1.\n"
    'Respond with JSON only, in this format: {"rating": number, "confidence": number}\n\n'
    "TEXT:\n"
)


def build_article_prompt(title: str, body: Optional[str], length: SummaryLength = SummaryLength.MEDIUM) -> str:
    return (
        f"{LENGTH_INSTRUCTIONS[length]} the following news article while maintaining the key points "
        "and important information:\n\n"
        f"Title: {title}\n"
        f"Content: {body or NO_CONTENT}\n\n"
        "Please provide a clear, informative summary that captures the essence of the article."
    )


def build_topic_prompt(topic: str, articles: Sequence[ArticleRecord], excerpt_chars: int) -> str:
    blocks = []
    for index, article in enumerate(articles, 1):
        excerpt = article.content or article.description or NO_CONTENT
        if len(excerpt) > excerpt_chars:
            excerpt = excerpt[:excerpt_chars].rstrip() + "..."
        blocks.append(
            f"Article {index}: {article.title}\n"
            f"Source: {article.source.name or UNKNOWN_SOURCE}\n"
            f"Published: {article.published_at.isoformat()}\n"
            f"Excerpt: {excerpt}"
        )
    joined = "\n\n".join(blocks)
    return (
        f'You are a news analyst. Using the {len(articles)} articles below about "{topic}", write a '
        "comprehensive briefing that covers:\n"
        "1. An overview of the current situation\n"
        "2. Key developments and recent events\n"
        "3. Differing viewpoints or perspectives across sources\n"
        "4. What to watch next, if the articles indicate it\n\n"
        "Write well-organized prose in short paragraphs. Refer to articles by their number "
        "(e.g. [Article 2]) when citing a specific claim. Do not invent facts that are not in the articles.\n\n"
        f"{joined}"
    )


def source_links(articles: Sequence[ArticleRecord]) -> List[SourceLink]:
    return [
        SourceLink(title=article.title, url=article.url, source=article.source.name or UNKNOWN_SOURCE)
        for article in articles
    ]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SummaryOrchestrator:
    def __init__(
        self,
        engine: SummarizationEngine,
        store: ArticleStore,
        *,
        timeout: float = 20.0,
        max_workers: int = 4,
        max_topic_articles: int = 10,
        excerpt_chars: int = 600,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.engine = engine
        self.store = store
        self.timeout = timeout
        self.max_workers = max(1, max_workers)
        self.max_topic_articles = max(1, max_topic_articles)
        self.excerpt_chars = excerpt_chars
        self._clock = clock

    def summarize_one(
        self, article_id: str, length: SummaryLength = SummaryLength.MEDIUM
    ) -> Tuple[ArticleRecord, SummaryOutcome]:
        """Summarize a stored article and persist the text as its ``ai_summary``."""
        article = self.store.get_by_id(article_id)
        if article is None:
            raise NotFound(f"Article with id {article_id} not found")

        prompt = build_article_prompt(article.title, article.content or article.description, length)
        outcome = self.complete(prompt, fallback=FALLBACK_SUMMARY)
        updated = self.store.update(article_id, {"ai_summary": outcome.text})
        return updated, outcome

    def summarize_texts(
        self, articles: Sequence[SummaryArticleInput], length: SummaryLength = SummaryLength.MEDIUM
    ) -> List[SummaryOutcome]:
        """One independent summary per input article, in input order."""
        if not articles:
            return []

        def _one(article: SummaryArticleInput) -> SummaryOutcome:
            prompt = build_article_prompt(article.title, article.content or article.description, length)
            return self.complete(prompt, fallback=FALLBACK_SUMMARY)

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(articles))) as executor:
            return list(executor.map(_one, articles))

    def summarize_batch(self, topic: str, articles: Sequence[ArticleRecord]) -> TopicSummaryResult:
        """
        Single engine call over up to ``max_topic_articles`` articles.

        Citations cover every input article and are built before the engine is
        called, so they are returned whatever the engine does.
        """
        links = source_links(articles)
        analyzed = list(articles[: self.max_topic_articles])

        if not analyzed:
            outcome = SummaryOutcome.ok(f'No recent articles were found about "{topic}".')
        else:
            prompt = build_topic_prompt(topic, analyzed, self.excerpt_chars)
            outcome = self.complete(prompt, fallback=TOPIC_FALLBACK_SUMMARY)

        return TopicSummaryResult(
            topic=topic,
            total_articles=len(articles),
            articles_analyzed=len(analyzed),
            summary=outcome.text,
            source_links=links,
            last_updated=self._clock(),
            degraded=outcome.degraded,
        )

    def analyze_sentiment(self, text: str) -> SentimentResult:
        outcome = self.complete(SENTIMENT_PROMPT + text, fallback="")
        if outcome.degraded:
            return SentimentResult(*DEFAULT_SENTIMENT, degraded=True)
        try:
            rating, confidence = parse_sentiment_response(outcome.text)
        except ValueError as exc:
            logger.warning("Unparseable sentiment response: %s", exc)
            return SentimentResult(*DEFAULT_SENTIMENT, degraded=True)
        return SentimentResult(rating=rating, confidence=confidence)

    def complete(self, prompt: str, *, fallback: str) -> SummaryOutcome:
        """Run one bounded engine call; never raises."""
        try:
            text = self._generate_with_timeout(prompt)
        except FuturesTimeout:
            logger.warning("Engine %s timed out after %ss; using fallback", self.engine.name, self.timeout)
            return SummaryOutcome.fallback(fallback, reason="timeout")
        except EngineError as exc:
            logger.warning("Engine %s failed (%s): %s; using fallback", self.engine.name, exc.kind, exc.message)
            return SummaryOutcome.fallback(fallback, reason=exc.kind)
        except Exception as exc:  # noqa: BLE001 - engine is best-effort
            logger.error("Engine %s raised unexpectedly: %s", self.engine.name, exc, exc_info=True)
            return SummaryOutcome.fallback(fallback, reason="engine")

        text = (text or "").strip()
        if not text:
            logger.warning("Engine %s returned an empty response; using fallback", self.engine.name)
            return SummaryOutcome.fallback(fallback, reason="empty")
        return SummaryOutcome.ok(text)

    def _generate_with_timeout(self, prompt: str) -> str:
        # one thread per call; a timed-out engine call is left to finish in the background
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="summary-engine")
        try:
            future = executor.submit(self.engine.generate, prompt)
            return future.result(timeout=self.timeout)
        finally:
            executor.shutdown(wait=False)
