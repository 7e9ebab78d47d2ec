from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from news.errors import EngineError, EngineTimeout, ProviderError, UpstreamTimeout
from news.http_client import HttpClient

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"


class GeminiEngine:
    """REST client for Gemini ``generateContent`` (Google AI Studio)."""

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_GEMINI_MODEL,
        timeout: float = 20,
        temperature: float = 0.3,
        base_url: str = GEMINI_BASE_URL,
        http: Optional[HttpClient] = None,
    ) -> None:
        if not api_key:
            raise ValueError("GEMINI_API_KEY is required for the Gemini backend")
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.base_url = base_url.rstrip("/")
        self.http = http or HttpClient(timeout=timeout)

    def generate(self, prompt: str, model_hint: Optional[str] = None) -> str:
        model = model_hint or self.model
        url = f"{self.base_url}/models/{model}:generateContent"
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": self.temperature},
        }
        try:
            data = self.http.post(url, payload, headers={"x-goog-api-key": self.api_key})
        except UpstreamTimeout as exc:
            raise EngineTimeout(exc.message) from exc
        except ProviderError as exc:
            raise EngineError(f"Gemini request failed: {exc.message}") from exc
        return _extract_text(data)


def _extract_text(data: Dict[str, Any]) -> str:
    candidates = data.get("candidates") or []
    if not candidates:
        reason = (data.get("promptFeedback") or {}).get("blockReason")
        raise EngineError(f"Gemini returned no candidates{f' ({reason})' if reason else ''}")
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts if isinstance(part, dict)).strip()
