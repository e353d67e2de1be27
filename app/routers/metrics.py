from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models import NewsArticle, NewsCategory
from app.schemas import MetricsResponse

router = APIRouter(prefix="/api/v1/metrics", tags=["metrics"])

@router.get("", response_model=MetricsResponse)
async def get_metrics(db: AsyncSession = Depends(get_db)):

    totals = (
        await db.execute(
            select(
                func.count(NewsArticle.id),
                func.coalesce(func.sum(NewsArticle.view_count), 0),
            )
        )
    ).one()

    featured = (
        await db.execute(
            select(func.count()).select_from(NewsArticle).where(NewsArticle.is_featured.is_(True))
        )
    ).scalar_one()

    rows = await db.execute(
        select(NewsArticle.category, func.count()).group_by(NewsArticle.category)
    )
    per_category = {category.value: 0 for category in NewsCategory}
    for category, count in rows.all():
        per_category[category.value] = count

    return MetricsResponse(
        total_articles=totals[0],
        featured_articles=featured,
        total_views=int(totals[1]),
        articles_per_category=per_category,
    )
