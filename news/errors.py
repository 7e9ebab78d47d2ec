"""
Error taxonomy for the aggregation + summarization core.

Every error carries a ``kind`` (stable machine-readable tag) and the HTTP
status the route layer should answer with.
"""
from __future__ import annotations

from typing import Optional


class NewsError(Exception):
    kind = "error"
    http_status = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"status": "error", "kind": self.kind, "message": self.message}


class ValidationError(NewsError):
    """Bad filter shape, out-of-range paging or a malformed request body."""

    kind = "validation"
    http_status = 400


class NotFound(NewsError):
    kind = "not_found"
    http_status = 404


class ProviderError(NewsError):
    """Upstream news provider answered with a non-success status or could not be reached."""

    kind = "provider"
    http_status = 502

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["upstreamStatus"] = self.status
        payload["retryable"] = True
        return payload


class UpstreamTimeout(NewsError):
    """A bounded wait on the provider or the engine expired."""

    kind = "timeout"
    http_status = 504

    def __init__(self, message: str, source: str = "provider") -> None:
        super().__init__(message)
        self.source = source

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["retryable"] = True
        return payload


class EngineError(NewsError):
    """Summarization engine failure. Absorbed into fallback text by the orchestrator."""

    kind = "engine"


class EngineTimeout(EngineError):
    kind = "timeout"


class NormalizationError(NewsError):
    """A single provider item could not be mapped into an article draft."""

    kind = "normalization"
