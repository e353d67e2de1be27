from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Enum, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


# ---------------------------------------------------------------------------
# NewsCategory
# ---------------------------------------------------------------------------
class NewsCategory(str, enum.Enum):
    """Closed set of site sections.  Values are the labels stored and sent on the wire."""

    SPORTS = "Olahraga"
    POLITICS = "Politik"
    TECHNOLOGY = "Teknologi"
    ENTERTAINMENT = "Hiburan"


# ---------------------------------------------------------------------------
# NewsArticle
# ---------------------------------------------------------------------------
class NewsArticle(Base):
    __tablename__ = "news_articles"

    __table_args__ = (
        # Category pages, newest first
        Index("ix_news_articles_category_created_at", "category", "created_at"),
        # Homepage featured block
        Index("ix_news_articles_is_featured_created_at", "is_featured", "created_at"),
        # Popular ranking
        Index("ix_news_articles_view_count", "view_count"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    excerpt: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[NewsCategory] = mapped_column(
        Enum(
            NewsCategory,
            name="news_category",
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
    )
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    author: Mapped[str] = mapped_column(Text, nullable=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # Both timestamps are written by the repository, never by the database,
    # so every backend keeps microsecond resolution.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<NewsArticle id={self.id} category={self.category.value!r} title={self.title!r}>"
