# Repositories package.
#
#   article_repository  — ArticleRepository, the only code issuing SQL
#                         against news_articles
#   filters             — ArticleFilters + predicate composition for listings
from app.repositories.article_repository import ArticleRepository, ListOrder
from app.repositories.filters import ArticleFilters, build_conditions

__all__ = ["ArticleFilters", "ArticleRepository", "ListOrder", "build_conditions"]
