"""
Map raw provider articles onto the canonical article draft.
"""
from __future__ import annotations

import logging
from datetime import timezone
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from news.errors import NormalizationError
from news.models import ArticleDraft, ArticleSource
from news.schemas import FilterSpec, RawArticle, RawSource

logger = logging.getLogger(__name__)

UNKNOWN_SOURCE = "Unknown Source"
REMOVED_MARKER = "[Removed]"


def _coerce_source(raw: Any) -> ArticleSource:
    try:
        parsed = RawSource.model_validate(raw)
    except PydanticValidationError:
        logger.warning("Malformed source payload %r; using placeholder", raw)
        return ArticleSource(name=UNKNOWN_SOURCE)
    return ArticleSource(id=parsed.id, name=parsed.name)


def normalize_article(raw: Mapping[str, Any], filters: FilterSpec) -> ArticleDraft:
    """
    Build a draft from one provider item. ``category``/``country`` come from the
    request filters, never from the payload.
    """
    if not isinstance(raw, Mapping):
        raise NormalizationError(f"Provider item is not an object: {type(raw).__name__}")
    try:
        parsed = RawArticle.model_validate(raw)
    except PydanticValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        raise NormalizationError(f"Invalid provider article ({fields})") from exc

    if parsed.title == REMOVED_MARKER:
        raise NormalizationError("Provider article was removed upstream")

    published_at = parsed.published_at
    if published_at.tzinfo is None:
        published_at = published_at.replace(tzinfo=timezone.utc)

    return ArticleDraft(
        title=parsed.title,
        url=parsed.url,
        published_at=published_at,
        source=_coerce_source(parsed.source),
        description=parsed.description,
        content=parsed.content,
        image_url=parsed.image_url,
        author=parsed.author,
        category=filters.category,
        country=filters.country,
    )
