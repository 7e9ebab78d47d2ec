"""
Centralised settings (env-first, optional YAML overlay, built-in defaults).

Lookup order for every key: environment variable, then the matching key in
the YAML overlay, then the default below.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from news.config_loader import load_config_file

logger = logging.getLogger(__name__)


@dataclass
class NewsSettings:
    news_api_key: Optional[str] = None
    news_api_base_url: str = "https://newsapi.org/v2"
    provider_timeout: float = 10.0
    provider_retries: int = 0
    provider_min_interval: float = 0.0
    default_country: str = "us"
    default_search_term: str = "technology"
    summary_backend: str = "gemini"
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"
    openai_api_key: Optional[str] = None
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"
    summary_timeout: float = 20.0
    summary_workers: int = 4
    topic_fetch_size: int = 20
    topic_max_articles: int = 10
    topic_excerpt_chars: int = 600


def _lookup(env_keys, overlay: Dict[str, Any], overlay_key: str) -> Optional[Any]:
    for key in env_keys:
        raw = os.getenv(key)
        if raw is not None and str(raw).strip() != "":
            return raw
    value = overlay.get(overlay_key)
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return None
    return value


def _str(env_keys, overlay, overlay_key, default):
    value = _lookup(env_keys, overlay, overlay_key)
    return str(value).strip() if value is not None else default


def _positive(env_keys, overlay, overlay_key, default, cast):
    raw = _lookup(env_keys, overlay, overlay_key)
    if raw is None:
        return default
    try:
        value = cast(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid value for %s=%s; using default %s", env_keys[0], raw, default)
        return default
    if value < 0 or (value == 0 and default > 0):
        logger.warning("Out-of-range value for %s=%s; using default %s", env_keys[0], raw, default)
        return default
    return value


def load_settings(config_path: Optional[Path] = None) -> NewsSettings:
    overlay = load_config_file(config_path)
    defaults = NewsSettings()
    return NewsSettings(
        news_api_key=_str(("NEWS_API_KEY", "NEWSAPI_KEY"), overlay, "news_api_key", None),
        news_api_base_url=_str(("NEWS_API_BASE_URL",), overlay, "news_api_base_url", defaults.news_api_base_url),
        provider_timeout=_positive(("NEWS_PROVIDER_TIMEOUT",), overlay, "provider_timeout", defaults.provider_timeout, float),
        provider_retries=_positive(("NEWS_PROVIDER_RETRIES",), overlay, "provider_retries", defaults.provider_retries, int),
        provider_min_interval=_positive(
            ("NEWS_PROVIDER_MIN_INTERVAL",), overlay, "provider_min_interval", defaults.provider_min_interval, float
        ),
        default_country=_str(("NEWS_DEFAULT_COUNTRY",), overlay, "default_country", defaults.default_country).lower(),
        default_search_term=_str(("NEWS_DEFAULT_SEARCH_TERM",), overlay, "default_search_term", defaults.default_search_term),
        summary_backend=_str(("SUMMARY_BACKEND",), overlay, "summary_backend", defaults.summary_backend).lower(),
        gemini_api_key=_str(("GEMINI_API_KEY",), overlay, "gemini_api_key", None),
        gemini_model=_str(("GEMINI_MODEL",), overlay, "gemini_model", defaults.gemini_model),
        openai_api_key=_str(("OPENAI_API_KEY", "DEEPSEEK_API_KEY"), overlay, "openai_api_key", None),
        openai_base_url=_str(("OPENAI_BASE_URL",), overlay, "openai_base_url", defaults.openai_base_url),
        openai_model=_str(("OPENAI_MODEL",), overlay, "openai_model", defaults.openai_model),
        summary_timeout=_positive(("SUMMARY_TIMEOUT",), overlay, "summary_timeout", defaults.summary_timeout, float),
        summary_workers=_positive(("SUMMARY_WORKERS",), overlay, "summary_workers", defaults.summary_workers, int),
        topic_fetch_size=min(
            100, _positive(("TOPIC_FETCH_SIZE",), overlay, "topic_fetch_size", defaults.topic_fetch_size, int)
        ),
        topic_max_articles=_positive(("TOPIC_MAX_ARTICLES",), overlay, "topic_max_articles", defaults.topic_max_articles, int),
        topic_excerpt_chars=_positive(
            ("TOPIC_EXCERPT_CHARS",), overlay, "topic_excerpt_chars", defaults.topic_excerpt_chars, int
        ),
    )
