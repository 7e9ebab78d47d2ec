"""
Status/health payload for the system-health endpoint. Secrets are reported
only as configured/not configured.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict

from news.models import HealthStatus
from utils.security import is_configured_key

if TYPE_CHECKING:  # pragma: no cover
    from news import NewsServices


def _health_to_dict(status: HealthStatus) -> Dict[str, Any]:
    return {
        "name": status.name,
        "healthy": status.healthy,
        "last_error": status.last_error,
        "last_success": status.last_success.isoformat() if status.last_success else None,
        "items_last_fetch": status.items_last_fetch,
        "latency_ms": status.latency_ms,
        "extra": status.extra,
    }


def build_status(services: "NewsServices") -> Dict[str, Any]:
    settings = services.settings
    health = [_health_to_dict(entry) for entry in services.pipeline.get_health()]
    return {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "pipeline": {
            "health": health,
            "provider": getattr(services.pipeline.provider, "name", "provider"),
            "provider_configured": is_configured_key(settings.news_api_key),
            "default_country": settings.default_country,
            "default_search_term": settings.default_search_term,
        },
        "store": {"articles": len(services.store)},
        "summarizer": {
            "engine": getattr(services.summarizer.engine, "name", "engine"),
            "timeout_seconds": services.summarizer.timeout,
            "max_topic_articles": services.summarizer.max_topic_articles,
        },
        "config": {
            "provider_timeout_seconds": settings.provider_timeout,
            "summary_backend": settings.summary_backend,
        },
    }
