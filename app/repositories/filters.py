"""
Listing filters for news articles.

``ArticleFilters`` holds the optional category / featured / search
criteria.  ``build_conditions`` turns the criteria that are present into
SQL predicates; the repository ANDs them together.  Search is itself an
OR over title, content and excerpt (case-insensitive substring).
"""
from dataclasses import dataclass

from sqlalchemy import ColumnElement, or_

from app.models import NewsArticle, NewsCategory
from app.schemas import normalize_search

_SEARCH_COLUMNS = (NewsArticle.title, NewsArticle.content, NewsArticle.excerpt)


@dataclass(frozen=True)
class ArticleFilters:
    category: NewsCategory | None = None
    featured: bool | None = None
    search: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "search", normalize_search(self.search))

    @property
    def is_empty(self) -> bool:
        return self.category is None and self.featured is None and self.search is None


def search_condition(term: str) -> ColumnElement[bool]:
    # autoescape makes % and _ in the reader's text match literally.
    return or_(*(column.icontains(term, autoescape=True) for column in _SEARCH_COLUMNS))


def build_conditions(filters: ArticleFilters | None) -> list[ColumnElement[bool]]:
    if filters is None or filters.is_empty:
        return []

    conditions: list[ColumnElement[bool]] = []
    if filters.category is not None:
        conditions.append(NewsArticle.category == filters.category)
    if filters.featured is not None:
        conditions.append(NewsArticle.is_featured.is_(filters.featured))
    if filters.search is not None:
        conditions.append(search_condition(filters.search))
    return conditions
