"""
Test infrastructure for the news API.

Strategy
--------
- SQLite in-memory via aiosqlite, so no Postgres is needed in CI.
- StaticPool makes every session share the one in-memory connection;
  a fresh connection would see an empty database.
- The app's get_db dependency is overridden with the test session
  factory.
- Tables are created before and dropped after every test.
- ``sql_log`` records every statement the test engine sends, for tests
  that assert on the shape of the SQL (e.g. the atomic view increment).
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from app.database import Base, build_engine, get_db
from app.main import app
from app.models import NewsCategory
from app.schemas import NewsArticleCreate

# ---------------------------------------------------------------------------
# Test database engine — SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = build_engine(TEST_DATABASE_URL, poolclass=StaticPool)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)

_statements: list[str] = []


@event.listens_for(engine_test.sync_engine, "before_cursor_execute")
def _record_statement(conn, cursor, statement, parameters, context, executemany):
    _statements.append(statement)


# ---------------------------------------------------------------------------
# Dependency override — replace production get_db with the test session factory
# ---------------------------------------------------------------------------

async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    _statements.clear()
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """A live AsyncSession for tests that call services or the repository directly."""
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """httpx.AsyncClient wired to the FastAPI app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sql_log() -> list[str]:
    """Statements sent by the test engine since the fixture was requested."""
    _statements.clear()
    return _statements


def make_article(**overrides) -> NewsArticleCreate:
    """Build a valid create payload; keyword arguments override defaults."""
    fields = {
        "title": "Sample headline",
        "content": "Sample body text",
        "excerpt": "Sample excerpt",
        "category": NewsCategory.SPORTS,
        "image_url": None,
        "author": "Desk Reporter",
        "is_featured": False,
    }
    fields.update(overrides)
    return NewsArticleCreate(**fields)


@pytest.fixture
def article_payload():
    """Factory for valid create payloads (see ``make_article``)."""
    return make_article
