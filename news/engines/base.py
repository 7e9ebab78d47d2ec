"""
Summarization engine protocol.
"""
from __future__ import annotations

from typing import Optional, Protocol

from news.errors import EngineError


class SummarizationEngine(Protocol):
    name: str

    def generate(self, prompt: str, model_hint: Optional[str] = None) -> str:
        """Return generated text or raise ``EngineError``/``EngineTimeout``."""
        ...


class UnavailableEngine:
    """Stands in when no backend is configured; every call fails so callers get fallback text."""

    name = "unavailable"

    def __init__(self, reason: str = "no summarization backend configured") -> None:
        self.reason = reason

    def generate(self, prompt: str, model_hint: Optional[str] = None) -> str:
        raise EngineError(self.reason)
