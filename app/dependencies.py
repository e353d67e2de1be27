from fastapi import Query

from app.config import settings
from app.models import NewsCategory
from app.schemas import ArticleListQuery


class ListFilterParams:
    """
    FastAPI dependency parsing the article listing query string.

    Usage in a router::

        @router.get("/articles")
        async def list_articles(params: ListFilterParams = Depends()):
            ...

    Attributes
    ----------
    category / featured / search:
        Optional filters; absent ones impose no constraint.
    limit:
        Page size, 1..``settings.MAX_PAGE_SIZE``; larger values are
        rejected with 422 rather than clamped.
    offset:
        Number of matching rows to skip.
    """

    def __init__(
        self,
        category: NewsCategory | None = Query(None, description="Restrict to one category."),
        featured: bool | None = Query(None, description="Restrict to featured / non-featured."),
        search: str | None = Query(
            None,
            description="Case-insensitive text matched against title, content and excerpt.",
        ),
        limit: int = Query(
            settings.DEFAULT_PAGE_SIZE,
            ge=1,
            le=settings.MAX_PAGE_SIZE,
            description=f"Number of articles per page (max {settings.MAX_PAGE_SIZE}).",
        ),
        offset: int = Query(0, ge=0, description="Number of articles to skip."),
    ) -> None:
        self.category = category
        self.featured = featured
        self.search = search
        self.limit = limit
        self.offset = offset

    def to_query(self) -> ArticleListQuery:
        return ArticleListQuery(
            category=self.category,
            featured=self.featured,
            search=self.search,
            limit=self.limit,
            offset=self.offset,
        )
