from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.config import settings
from app.models import NewsCategory


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


def normalize_search(value: str | None) -> str | None:
    """Strip *value*; an empty or whitespace-only search means no search."""
    if value is None:
        return None
    value = value.strip()
    return value or None


# --- Article ---

class NewsArticleCreate(BaseModel):
    title: str
    content: str
    excerpt: str
    category: NewsCategory
    image_url: str | None = None
    author: str
    is_featured: bool = False

    @field_validator("title", "content", "excerpt", "author")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        return _require_text(value)


class NewsArticleUpdate(BaseModel):
    """
    Partial update payload.

    Each field has three states, read from ``model_fields_set``:
    absent (leave unchanged), present with ``None`` (clear; only
    ``image_url`` accepts this) and present with a value (overwrite).
    """

    title: str | None = None
    content: str | None = None
    excerpt: str | None = None
    category: NewsCategory | None = None
    image_url: str | None = None
    author: str | None = None
    is_featured: bool | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("title", "content", "excerpt", "author")
    @classmethod
    def _not_blank(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("may not be null")
        return _require_text(value)

    @field_validator("category", "is_featured")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value

    def changes(self) -> dict:
        """Return only the fields the caller explicitly sent."""
        return self.model_dump(exclude_unset=True)


class NewsArticleResponse(BaseModel):
    id: int
    title: str
    content: str
    excerpt: str
    category: NewsCategory
    image_url: str | None
    author: str
    is_featured: bool
    view_count: int
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive datetimes for timezone-aware columns.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


# --- Listing ---

class ArticleListQuery(BaseModel):
    category: NewsCategory | None = None
    featured: bool | None = None
    search: str | None = None
    limit: int = Field(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE)
    offset: int = Field(0, ge=0)

    @field_validator("search")
    @classmethod
    def _normalize_search(cls, value: str | None) -> str | None:
        return normalize_search(value)


class CategoryPageQuery(BaseModel):
    category: NewsCategory
    limit: int = Field(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_HOMEPAGE_LIMIT)
    offset: int = Field(0, ge=0)


class HomepageQuery(BaseModel):
    """Limit for the latest / popular homepage blocks."""

    limit: int = Field(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_HOMEPAGE_LIMIT)


class FeaturedQuery(BaseModel):
    limit: int = Field(settings.DEFAULT_FEATURED_LIMIT, ge=1, le=settings.MAX_FEATURED_LIMIT)


class ArticleListResponse(BaseModel):
    articles: list[NewsArticleResponse]
    total: int


# --- Metrics ---

class MetricsResponse(BaseModel):
    total_articles: int
    featured_articles: int
    total_views: int
    articles_per_category: dict[str, int] = {}
