"""
Regression tests for behaviour that is easy to break during refactors.

1. The view increment is one atomic UPDATE, never a read-then-write
2. updated_at strictly increases on every mutation, including view increments
3. Deleting one article leaves every other row untouched
4. The popular listing's total counts all articles
5. X-Query-Count reports the real statement count
6. CORS must not set allow_credentials=true with allow_origins=*
7. View increments from concurrent sessions are all counted
8. setup_logging() can run more than once without stacking handlers
"""
import asyncio
import logging

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, AsyncSession
from sqlalchemy.pool import NullPool

from app.database import Base, build_engine
from app.logging_config import HANDLER_NAME, setup_logging
from app.models import NewsCategory
from app.schemas import NewsArticleUpdate
from app.services import article_service

from tests.conftest import make_article


# ---------------------------------------------------------------------------
# 1. Atomic view increment
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_increment_view_is_a_single_update(db_session: AsyncSession, sql_log: list[str]):
    created = await article_service.create_article(db_session, make_article())
    sql_log.clear()

    assert await article_service.increment_view(db_session, created.id) is True

    statements = [s.strip().lower() for s in sql_log]
    assert len(statements) == 1, statements
    assert statements[0].startswith("update news_articles")
    assert "news_articles.view_count +" in statements[0]
    assert not any(s.startswith("select") for s in statements)


@pytest.mark.asyncio
async def test_increment_view_n_times_adds_n(db_session: AsyncSession):
    created = await article_service.create_article(db_session, make_article())
    for _ in range(7):
        await article_service.increment_view(db_session, created.id)
    fetched = await article_service.get_article(db_session, created.id)
    assert fetched.view_count == 7


# ---------------------------------------------------------------------------
# 2. updated_at monotonicity
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_updated_at_strictly_increases_per_increment(db_session: AsyncSession):
    created = await article_service.create_article(db_session, make_article())
    previous = created.updated_at
    for _ in range(3):
        await asyncio.sleep(0.002)
        await article_service.increment_view(db_session, created.id)
        current = (await article_service.get_article(db_session, created.id)).updated_at
        assert current > previous
        previous = current

    final = await article_service.get_article(db_session, created.id)
    assert final.created_at == created.created_at
    assert final.updated_at >= final.created_at


@pytest.mark.asyncio
async def test_update_never_touches_view_count(db_session: AsyncSession):
    created = await article_service.create_article(db_session, make_article())
    await article_service.increment_view(db_session, created.id)
    updated = await article_service.update_article(
        db_session, created.id, NewsArticleUpdate(title="Edited")
    )
    assert updated.view_count == 1
    assert updated.id == created.id


# ---------------------------------------------------------------------------
# 3. Delete isolation
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_delete_leaves_other_rows_untouched(db_session: AsyncSession):
    created = [
        await article_service.create_article(
            db_session, make_article(title=f"Story {i}", category=category)
        )
        for i, category in enumerate(NewsCategory)
    ]
    before = {
        a.id: a for a in (await article_service.list_latest(db_session, limit=50)).articles
    }
    assert len(before) == 4

    victim = created[1].id
    assert await article_service.delete_article(db_session, victim) is True

    after = await article_service.list_latest(db_session, limit=50)
    assert after.total == 3
    assert victim not in {a.id for a in after.articles}
    for article in after.articles:
        assert article == before[article.id]


# ---------------------------------------------------------------------------
# 4. Popular total
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_popular_total_counts_all_articles(db_session: AsyncSession):
    for i in range(4):
        await article_service.create_article(db_session, make_article(title=f"Story {i}"))
    result = await article_service.list_popular(db_session, limit=1)
    assert len(result.articles) == 1
    assert result.total == 4


# ---------------------------------------------------------------------------
# 5. X-Query-Count reports actual statement count
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_query_count_header_for_increment(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/articles", json={
        "title": "Counted",
        "content": "Body",
        "excerpt": "Excerpt",
        "category": "Teknologi",
        "author": "Desk",
    })
    article_id = resp.json()["id"]

    resp = await async_client.post(f"/api/v1/articles/{article_id}/views")
    assert resp.status_code == 204
    assert int(resp.headers["x-query-count"]) == 1


# ---------------------------------------------------------------------------
# 6. CORS headers
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_cors_no_credentials_with_wildcard_origin(async_client: AsyncClient):
    resp = await async_client.options(
        "/api/v1/articles",
        headers={
            "Origin": "https://example.com",
            "Access-Control-Request-Method": "GET",
        },
    )
    cred_header = resp.headers.get("access-control-allow-credentials", "").lower()
    assert cred_header != "true", (
        "CORS must not combine allow_origins=* with allow_credentials=true"
    )


# ---------------------------------------------------------------------------
# 7. Concurrent view increments
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_concurrent_increments_are_all_counted(tmp_path):
    # A file database with NullPool gives every session its own connection,
    # so the increments really run in separate transactions.
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'views.db'}", poolclass=NullPool)
    sessions = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    readers = 20
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        async with sessions() as db:
            created = await article_service.create_article(db, make_article())
            await db.commit()

        async def view_once():
            async with sessions() as db:
                assert await article_service.increment_view(db, created.id) is True
                await db.commit()

        await asyncio.gather(*(view_once() for _ in range(readers)))

        async with sessions() as db:
            fetched = await article_service.get_article(db, created.id)
        assert fetched.view_count == readers
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# 8. Logging setup is idempotent
# ---------------------------------------------------------------------------

def test_setup_logging_installs_one_handler():
    root = logging.getLogger()
    level = root.level
    try:
        setup_logging()
        setup_logging()
        ours = [h for h in root.handlers if h.get_name() == HANDLER_NAME]
        assert len(ours) == 1
    finally:
        for handler in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
            root.removeHandler(handler)
        root.setLevel(level)
