"""
Provider protocol: the three capability calls the aggregation pipeline needs.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

from news.models import ProviderResponse
from news.schemas import FilterSpec


class NewsProvider(Protocol):
    name: str

    def fetch_top_headlines(self, filters: FilterSpec) -> ProviderResponse:
        ...

    def search_everything(self, filters: FilterSpec) -> ProviderResponse:
        ...

    def list_sources(self, country: Optional[str] = None, category: Optional[str] = None) -> List[Dict[str, Any]]:
        ...
