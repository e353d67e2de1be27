from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.config import settings
from app.middleware import install_query_counter


def build_engine(url: str, **kwargs) -> AsyncEngine:
    """
    Create an async engine for *url* with the per-request SQL counter
    attached.  SQLite URLs get ``check_same_thread=False`` so the
    aiosqlite worker thread can share the connection.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_pre_ping", True)
    new_engine = create_async_engine(url, echo=settings.DEBUG, **kwargs)
    install_query_counter(new_engine)
    return new_engine


# Module-level engine variable allows tests to override with a test engine.
engine = build_engine(settings.DATABASE_URL)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


async def get_db():
    """Yield a session; commit when the request succeeds, roll back otherwise."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def dispose_engine() -> None:
    await engine.dispose()
