"""
In-memory article store.

The store is the single writer for ``ArticleRecord`` values. Records are frozen
dataclasses, so readers always hold a complete snapshot; updates swap a new
record into the map under the lock.
"""
from __future__ import annotations

import dataclasses
import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from news.errors import NotFound, ValidationError
from news.models import ArticleDraft, ArticleRecord

logger = logging.getLogger(__name__)

IMMUTABLE_FIELDS = frozenset({"id", "created_at"})
UPDATABLE_FIELDS = frozenset(
    f.name for f in dataclasses.fields(ArticleRecord) if f.name not in IMMUTABLE_FIELDS
)


def _default_clock() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ArticleStore:
    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._articles: Dict[str, ArticleRecord] = {}
        self._lock = threading.RLock()
        self._clock = clock or _default_clock

    def create(self, draft: ArticleDraft) -> ArticleRecord:
        values = {f.name: getattr(draft, f.name) for f in dataclasses.fields(draft)}
        values["published_at"] = _as_utc(draft.published_at)
        record = ArticleRecord(id=str(uuid.uuid4()), created_at=self._clock(), **values)
        with self._lock:
            self._articles[record.id] = record
        return record

    def get_by_id(self, article_id: str) -> Optional[ArticleRecord]:
        with self._lock:
            return self._articles.get(article_id)

    def get_all(
        self,
        *,
        country: Optional[str] = None,
        category: Optional[str] = None,
        sources: Optional[Iterable[str]] = None,
    ) -> List[ArticleRecord]:
        """
        Return matching records newest first; equal timestamps keep insertion order.

        ``sources`` matches either ``source.name`` or ``source.id``.
        """
        wanted = frozenset(sources or ())
        with self._lock:
            snapshot = list(self._articles.values())

        matches = []
        for record in snapshot:
            if country and record.country != country:
                continue
            if category and record.category != category:
                continue
            if wanted and record.source.name not in wanted and record.source.id not in wanted:
                continue
            matches.append(record)
        return sorted(matches, key=lambda record: record.published_at, reverse=True)

    def update(self, article_id: str, changes: Mapping[str, Any]) -> ArticleRecord:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update article fields: {', '.join(sorted(unknown))}")
        with self._lock:
            existing = self._articles.get(article_id)
            if existing is None:
                raise NotFound(f"Article with id {article_id} not found")
            if existing.ai_summary is not None and "ai_summary" in changes and changes["ai_summary"] is None:
                raise ValidationError("aiSummary cannot be cleared once set")
            updated = dataclasses.replace(existing, **dict(changes))
            self._articles[article_id] = updated
        logger.debug("Updated article %s fields=%s", article_id, sorted(changes))
        return updated

    def __len__(self) -> int:
        with self._lock:
            return len(self._articles)
