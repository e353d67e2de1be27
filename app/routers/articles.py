from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.dependencies import ListFilterParams
from app.models import NewsCategory
from app.schemas import ArticleListResponse, NewsArticleCreate, NewsArticleResponse, NewsArticleUpdate
from app.services import article_service

router = APIRouter(prefix="/api/v1/articles", tags=["articles"])

_NOT_FOUND = "Article not found"


# Fixed paths are declared before "/{article_id}" so they are matched first.

@router.get("", response_model=ArticleListResponse)
async def list_articles(
    params: ListFilterParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.list_articles(db, params.to_query())

@router.get("/latest", response_model=ArticleListResponse)
async def list_latest(
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_HOMEPAGE_LIMIT),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.list_latest(db, limit)

@router.get("/popular", response_model=ArticleListResponse)
async def list_popular(
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_HOMEPAGE_LIMIT),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.list_popular(db, limit)

@router.get("/featured", response_model=ArticleListResponse)
async def list_featured(
    limit: int = Query(settings.DEFAULT_FEATURED_LIMIT, ge=1, le=settings.MAX_FEATURED_LIMIT),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.list_featured(db, limit)

@router.get("/category/{category}", response_model=ArticleListResponse)
async def list_by_category(
    category: NewsCategory,
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_HOMEPAGE_LIMIT),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.list_by_category(db, category, limit, offset)

@router.get("/{article_id}", response_model=NewsArticleResponse)
async def get_article(article_id: int, db: AsyncSession = Depends(get_db)):
    article = await article_service.get_article(db, article_id)
    if article is None:
        raise HTTPException(status_code=404, detail=_NOT_FOUND)
    return article

@router.post("", status_code=201, response_model=NewsArticleResponse)
async def create_article(data: NewsArticleCreate, db: AsyncSession = Depends(get_db)):
    return await article_service.create_article(db, data)

@router.patch("/{article_id}", response_model=NewsArticleResponse)
async def update_article(article_id: int, data: NewsArticleUpdate, db: AsyncSession = Depends(get_db)):
    article = await article_service.update_article(db, article_id, data)
    if article is None:
        raise HTTPException(status_code=404, detail=_NOT_FOUND)
    return article

@router.delete("/{article_id}", status_code=204)
async def delete_article(article_id: int, db: AsyncSession = Depends(get_db)):
    deleted = await article_service.delete_article(db, article_id)
    if not deleted:
        raise HTTPException(status_code=404, detail=_NOT_FOUND)
    return Response(status_code=204)

@router.post("/{article_id}/views", status_code=204)
async def increment_view(article_id: int, db: AsyncSession = Depends(get_db)):
    counted = await article_service.increment_view(db, article_id)
    if not counted:
        raise HTTPException(status_code=404, detail=_NOT_FOUND)
    return Response(status_code=204)
