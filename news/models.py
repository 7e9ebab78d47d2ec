"""
Core data structures shared by the aggregation pipeline, the store and the
summarization orchestrator.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class SortBy(str, Enum):
    RELEVANCY = "relevancy"
    POPULARITY = "popularity"
    PUBLISHED_AT = "publishedAt"


class SummaryLength(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class ArticleSource:
    name: str
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class ArticleDraft:
    """
    Normalized article before the store assigns identity.
    """

    title: str
    url: str
    published_at: datetime
    source: ArticleSource
    description: Optional[str] = None
    content: Optional[str] = None
    image_url: Optional[str] = None
    author: Optional[str] = None
    category: Optional[str] = None
    country: Optional[str] = None


@dataclass(frozen=True)
class ArticleRecord:
    """
    Stored article. Instances are immutable; the store swaps in a new value on update.
    """

    id: str
    title: str
    url: str
    published_at: datetime
    source: ArticleSource
    created_at: datetime
    description: Optional[str] = None
    content: Optional[str] = None
    image_url: Optional[str] = None
    author: Optional[str] = None
    category: Optional[str] = None
    country: Optional[str] = None
    ai_summary: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "content": self.content,
            "url": self.url,
            "imageUrl": self.image_url,
            "publishedAt": _iso(self.published_at),
            "source": self.source.to_dict(),
            "author": self.author,
            "category": self.category,
            "country": self.country,
            "aiSummary": self.ai_summary,
            "createdAt": _iso(self.created_at),
        }


@dataclass
class ProviderResponse:
    status: str
    total_results: int
    articles: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class AggregationResult:
    status: str
    total_results: int
    articles: List[ArticleRecord]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "totalResults": self.total_results,
            "articles": [article.to_dict() for article in self.articles],
        }


@dataclass(frozen=True)
class SourceLink:
    title: str
    url: str
    source: str

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "url": self.url, "source": self.source}


@dataclass(frozen=True)
class SummaryOutcome:
    """Engine text, or the fallback text plus the reason the engine was skipped."""

    text: str
    degraded: bool = False
    reason: Optional[str] = None

    @classmethod
    def ok(cls, text: str) -> "SummaryOutcome":
        return cls(text=text)

    @classmethod
    def fallback(cls, text: str, reason: str) -> "SummaryOutcome":
        return cls(text=text, degraded=True, reason=reason)


@dataclass
class TopicSummaryResult:
    topic: str
    total_articles: int
    articles_analyzed: int
    summary: str
    source_links: List[SourceLink]
    last_updated: datetime
    degraded: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "topic": self.topic,
            "totalArticles": self.total_articles,
            "articlesAnalyzed": self.articles_analyzed,
            "summary": self.summary,
            "sourceLinks": [link.to_dict() for link in self.source_links],
            "lastUpdated": _iso(self.last_updated),
            "degraded": self.degraded,
        }


@dataclass(frozen=True)
class SentimentResult:
    rating: int
    confidence: float
    degraded: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"rating": self.rating, "confidence": self.confidence, "degraded": self.degraded}


@dataclass
class HealthStatus:
    name: str
    healthy: bool
    last_error: Optional[str] = None
    last_success: Optional[datetime] = None
    items_last_fetch: int = 0
    latency_ms: Optional[float] = None
    extra: Dict[str, str] = field(default_factory=dict)
