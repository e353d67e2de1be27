"""
Article store — all SQL touching the ``news_articles`` table.

The repository flushes but never commits; the transaction boundary is
owned by the ``get_db`` dependency (or the caller, outside HTTP).
Mutations that must not lose concurrent writes (view increment, delete)
are issued as single UPDATE / DELETE statements scoped by id.
"""
import enum
from datetime import datetime, timezone
from typing import Any, Sequence

from sqlalchemy import and_, delete, desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import NewsArticle
from app.repositories.filters import ArticleFilters, build_conditions

# Fields a partial update may touch; id, view_count and timestamps are excluded.
UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {"title", "content", "excerpt", "category", "image_url", "author", "is_featured"}
)


class ListOrder(str, enum.Enum):
    LATEST = "latest"
    POPULAR = "popular"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _order_by(order: ListOrder):
    if order is ListOrder.POPULAR:
        return (desc(NewsArticle.view_count), desc(NewsArticle.created_at), desc(NewsArticle.id))
    return (desc(NewsArticle.created_at), desc(NewsArticle.id))


class ArticleRepository:
    """Data access for ``NewsArticle`` over an ``AsyncSession``."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def insert(self, fields: dict[str, Any]) -> NewsArticle:
        now = utcnow()
        article = NewsArticle(
            **fields,
            view_count=0,
            created_at=now,
            updated_at=now,
        )
        self._session.add(article)
        await self._session.flush()
        return article

    async def get_by_id(self, article_id: int) -> NewsArticle | None:
        # populate_existing: bulk UPDATEs (view increments) bypass the identity map.
        return await self._session.get(NewsArticle, article_id, populate_existing=True)

    async def count(self, filters: ArticleFilters | None = None) -> int:
        q = select(func.count()).select_from(NewsArticle)
        conditions = build_conditions(filters)
        if conditions:
            q = q.where(and_(*conditions))
        return (await self._session.execute(q)).scalar_one()

    async def list_page(
        self,
        filters: ArticleFilters | None = None,
        limit: int = 10,
        offset: int = 0,
        order: ListOrder = ListOrder.LATEST,
    ) -> tuple[Sequence[NewsArticle], int]:
        """
        Return one page of matching articles and the total match count.

        The page and the count are two statements; the count may be
        marginally stale against concurrent writers.
        """
        q = select(NewsArticle)
        conditions = build_conditions(filters)
        if conditions:
            q = q.where(and_(*conditions))
        q = q.order_by(*_order_by(order)).offset(offset).limit(limit)
        result = await self._session.execute(q.execution_options(populate_existing=True))
        articles = result.scalars().all()
        total = await self.count(filters)
        return articles, total

    async def update(self, article_id: int, changes: dict[str, Any]) -> NewsArticle | None:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        article = await self.get_by_id(article_id)
        if article is None:
            return None

        for name, value in changes.items():
            setattr(article, name, value)
        # Always refreshed, even for an empty change set.
        article.updated_at = utcnow()
        await self._session.flush()
        return article

    async def increment_view(self, article_id: int) -> bool:
        stmt = (
            update(NewsArticle)
            .where(NewsArticle.id == article_id)
            .values(view_count=NewsArticle.view_count + 1, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0

    async def delete(self, article_id: int) -> bool:
        # "evaluate" evicts the deleted instance from the session.
        stmt = (
            delete(NewsArticle)
            .where(NewsArticle.id == article_id)
            .execution_options(synchronize_session="evaluate")
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0
