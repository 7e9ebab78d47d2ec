from __future__ import annotations

import logging

from news.engines.base import SummarizationEngine, UnavailableEngine
from news.settings import NewsSettings
from utils.security import is_configured_key

logger = logging.getLogger(__name__)


def create_engine(settings: NewsSettings) -> SummarizationEngine:
    """Create the engine named by ``settings.summary_backend``: gemini, openai or none.

    A backend without a usable key, or an unknown backend name, degrades to the unavailable engine
    instead of failing start-up.
    """
    selected = (settings.summary_backend or "gemini").lower()

    if selected == "none":
        return UnavailableEngine("summarization disabled (SUMMARY_BACKEND=none)")
    if selected == "gemini":
        if not is_configured_key(settings.gemini_api_key):
            logger.warning("GEMINI_API_KEY missing; summaries will use fallback text")
            return UnavailableEngine("GEMINI_API_KEY is not configured")
        from news.engines.gemini import GeminiEngine  # lazy import

        return GeminiEngine(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            timeout=settings.summary_timeout,
        )
    if selected in ("openai", "deepseek"):
        if not is_configured_key(settings.openai_api_key):
            logger.warning("OPENAI_API_KEY/DEEPSEEK_API_KEY missing; summaries will use fallback text")
            return UnavailableEngine("OPENAI_API_KEY is not configured")
        from news.engines.openai_compat import OpenAICompatibleEngine  # lazy import

        return OpenAICompatibleEngine(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            base_url=settings.openai_base_url,
            timeout=settings.summary_timeout,
        )

    logger.warning("Unsupported SUMMARY_BACKEND '%s' (use gemini, openai or none); summaries will use fallback text", selected)
    return UnavailableEngine(f"unsupported SUMMARY_BACKEND '{selected}'")
