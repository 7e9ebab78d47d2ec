"""
Pydantic models for everything that crosses an input boundary: query-string
filters, request bodies and raw provider payloads.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from news.errors import ValidationError
from news.models import SortBy, SummaryLength

M = TypeVar("M", bound=BaseModel)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _split_sources(value: Any) -> Optional[List[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        tokens = value.split(",")
    elif isinstance(value, (list, tuple)):
        tokens = []
        for entry in value:
            if not isinstance(entry, str):
                raise ValueError("sources must be strings")
            tokens.extend(entry.split(","))
    else:
        raise ValueError("sources must be a comma separated string or a list of strings")
    ordered: List[str] = []
    for token in tokens:
        token = token.strip()
        if token and token not in ordered:
            ordered.append(token)
    return ordered or None


class FilterSpec(BaseModel):
    """
    Filter parameters shared by the headline and search paths.

    ``sources`` keeps the caller's order for display but is matched as a set.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    country: Optional[str] = None
    category: Optional[str] = None
    sources: Optional[List[str]] = None
    query: Optional[str] = Field(default=None, alias="q")
    from_date: Optional[str] = Field(default=None, alias="from")
    to_date: Optional[str] = Field(default=None, alias="to")
    sort_by: Optional[SortBy] = Field(default=None, alias="sortBy")
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, alias="pageSize", ge=1, le=MAX_PAGE_SIZE)
    page: int = Field(default=1, ge=1)

    @field_validator("country", "category", "query", "from_date", "to_date", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("sources", mode="before")
    @classmethod
    def _parse_sources(cls, value: Any) -> Optional[List[str]]:
        return _split_sources(value)

    @field_validator("from_date", "to_date")
    @classmethod
    def _check_iso_date(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as exc:
            raise ValueError("must be an ISO-8601 date or datetime") from exc
        return value

    @property
    def source_set(self) -> frozenset:
        return frozenset(self.sources or ())

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "FilterSpec":
        """Build a filter from query-string style params; blank values count as absent."""
        cleaned = {
            key: value
            for key, value in params.items()
            if value is not None and not (isinstance(value, str) and not value.strip())
        }
        return parse_model(cls, cleaned)


class RawSource(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    name: str

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return _blank_to_none(str(value))

    @field_validator("name", mode="before")
    @classmethod
    def _require_name(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("source name is required")
        return value.strip()


class RawArticle(BaseModel):
    """
    One entry of a provider ``articles`` array. ``source`` is validated separately
    so a malformed source can be replaced by a placeholder instead of dropping the item.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    source: Any = None
    author: Optional[str] = None
    title: str
    description: Optional[str] = None
    url: str
    image_url: Optional[str] = Field(default=None, alias="urlToImage")
    published_at: datetime = Field(alias="publishedAt")
    content: Optional[str] = None

    @field_validator("author", "description", "image_url", "content", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("title", "url", mode="before")
    @classmethod
    def _required_text(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        if value is None:
            raise ValueError("field is required")
        return value


class SummaryArticleInput(BaseModel):
    title: str
    content: str = ""
    description: Optional[str] = None

    @field_validator("content", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class _LengthMixin(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    summary_length: SummaryLength = Field(default=SummaryLength.MEDIUM, alias="summaryLength")

    @field_validator("summary_length", mode="before")
    @classmethod
    def _default_length(cls, value: Any) -> Any:
        return SummaryLength.MEDIUM if value in (None, "") else value


class SummarizeRequest(_LengthMixin):
    articles: List[SummaryArticleInput]


class SummarizeArticleRequest(_LengthMixin):
    pass


class TopicSummaryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    topic: str = Field(min_length=1)
    max_articles: Optional[int] = Field(default=None, alias="maxArticles", ge=1, le=MAX_PAGE_SIZE)

    @field_validator("topic", mode="before")
    @classmethod
    def _strip_topic(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class SentimentRequest(BaseModel):
    text: str = Field(min_length=1)


class VoiceCommandRequest(BaseModel):
    transcript: str


def _format_errors(exc: PydanticValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "body"
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts)


def parse_model(model_cls: Type[M], data: Any) -> M:
    """Validate ``data`` into ``model_cls``, raising the core ValidationError on failure."""
    try:
        return model_cls.model_validate(data if data is not None else {})
    except PydanticValidationError as exc:
        raise ValidationError(_format_errors(exc)) from exc
