"""
Article service — the operations the reading site and the admin panel use.

Design notes
------------
- Inputs are validated by the pydantic schemas before the repository is
  touched, so a ``pydantic.ValidationError`` never leaves a partial write.
- A missing article is not an error here: lookups and updates return
  None, delete and view increment return False.  Routers decide what
  that means over HTTP.
- Database errors are logged and re-raised untouched; nothing retries.
- Service functions flush but do not commit; the transaction boundary
  is owned by the ``get_db`` dependency in the router layer.
"""
import logging
from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models import NewsArticle, NewsCategory
from app.repositories import ArticleFilters, ArticleRepository, ListOrder
from app.schemas import (
    ArticleListQuery,
    ArticleListResponse,
    CategoryPageQuery,
    FeaturedQuery,
    HomepageQuery,
    NewsArticleCreate,
    NewsArticleResponse,
    NewsArticleUpdate,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _to_response(article: NewsArticle) -> NewsArticleResponse:
    return NewsArticleResponse.model_validate(article)


def _to_list_response(articles: Sequence[NewsArticle], total: int) -> ArticleListResponse:
    return ArticleListResponse(articles=[_to_response(a) for a in articles], total=total)


# ---------------------------------------------------------------------------
# Admin operations
# ---------------------------------------------------------------------------

async def create_article(db: AsyncSession, data: NewsArticleCreate) -> NewsArticleResponse:
    """Insert a new article; it starts with zero views and equal timestamps."""
    try:
        article = await ArticleRepository(db).insert(data.model_dump())
    except SQLAlchemyError:
        logger.exception("News article creation failed")
        raise
    logger.info("Created article id=%s category=%s", article.id, article.category.value)
    return _to_response(article)


async def update_article(
    db: AsyncSession, article_id: int, data: NewsArticleUpdate
) -> NewsArticleResponse | None:
    """
    Apply the fields present in *data* to the article and return it.

    Fields the caller did not send are left alone; ``image_url`` sent as
    null is cleared.  ``updated_at`` moves forward even when *data* is
    empty.  Returns None when the article does not exist.
    """
    changes = data.changes()
    try:
        article = await ArticleRepository(db).update(article_id, changes)
    except SQLAlchemyError:
        logger.exception("News article update failed for id=%s", article_id)
        raise
    if article is None:
        logger.debug("Update skipped, article id=%s not found", article_id)
        return None
    logger.info("Updated article id=%s fields=%s", article_id, sorted(changes))
    return _to_response(article)


async def delete_article(db: AsyncSession, article_id: int) -> bool:
    """Hard-delete the article.  Returns False when it does not exist."""
    try:
        deleted = await ArticleRepository(db).delete(article_id)
    except SQLAlchemyError:
        logger.exception("News article deletion failed for id=%s", article_id)
        raise
    if deleted:
        logger.info("Deleted article id=%s", article_id)
    return deleted


# ---------------------------------------------------------------------------
# Reader operations
# ---------------------------------------------------------------------------

async def get_article(db: AsyncSession, article_id: int) -> NewsArticleResponse | None:
    """Return the article or None.  Does not count a view."""
    try:
        article = await ArticleRepository(db).get_by_id(article_id)
    except SQLAlchemyError:
        logger.exception("Failed to get news article id=%s", article_id)
        raise
    return _to_response(article) if article is not None else None


async def increment_view(db: AsyncSession, article_id: int) -> bool:
    """
    Count one view of the article.

    A single ``UPDATE ... SET view_count = view_count + 1`` so concurrent
    readers never lose increments.  Returns False when the article does
    not exist.
    """
    try:
        return await ArticleRepository(db).increment_view(article_id)
    except SQLAlchemyError:
        logger.exception("Failed to increment view count for id=%s", article_id)
        raise


async def _list(
    db: AsyncSession,
    filters: ArticleFilters | None,
    limit: int,
    offset: int = 0,
    order: ListOrder = ListOrder.LATEST,
) -> tuple[Sequence[NewsArticle], int]:
    try:
        articles, total = await ArticleRepository(db).list_page(filters, limit, offset, order)
    except SQLAlchemyError:
        logger.exception("Failed to list news articles (filters=%r, order=%s)", filters, order.value)
        raise
    logger.debug(
        "Listed %d of %d articles (filters=%r, limit=%d, offset=%d, order=%s)",
        len(articles), total, filters, limit, offset, order.value,
    )
    return articles, total


async def list_articles(db: AsyncSession, query: ArticleListQuery) -> ArticleListResponse:
    """
    Newest-first page of articles matching every filter given in *query*.

    Category and featured are exact matches; search is a case-insensitive
    substring match on title, content or excerpt.  ``total`` counts all
    matches regardless of limit / offset.
    """
    filters = ArticleFilters(category=query.category, featured=query.featured, search=query.search)
    articles, total = await _list(db, filters, query.limit, query.offset)
    return _to_list_response(articles, total)


async def list_by_category(
    db: AsyncSession,
    category: NewsCategory | str,
    limit: int = settings.DEFAULT_PAGE_SIZE,
    offset: int = 0,
) -> ArticleListResponse:
    query = CategoryPageQuery(category=category, limit=limit, offset=offset)
    articles, total = await _list(
        db, ArticleFilters(category=query.category), query.limit, query.offset
    )
    return _to_list_response(articles, total)


async def list_featured(
    db: AsyncSession, limit: int = settings.DEFAULT_FEATURED_LIMIT
) -> ArticleListResponse:
    query = FeaturedQuery(limit=limit)
    articles, total = await _list(db, ArticleFilters(featured=True), query.limit)
    return _to_list_response(articles, total)


async def list_latest(db: AsyncSession, limit: int = settings.DEFAULT_PAGE_SIZE) -> ArticleListResponse:
    query = HomepageQuery(limit=limit)
    articles, total = await _list(db, None, query.limit)
    return _to_list_response(articles, total)


async def list_popular(db: AsyncSession, limit: int = settings.DEFAULT_PAGE_SIZE) -> ArticleListResponse:
    """Most-viewed articles first.  ``total`` is the count of all articles."""
    query = HomepageQuery(limit=limit)
    articles, total = await _list(db, None, query.limit, order=ListOrder.POPULAR)
    return _to_list_response(articles, total)
