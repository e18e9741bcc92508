# python
"""Database engine and session utilities.

This module sets up the asynchronous database engine and session factory used
by the SQL document store, plus a helper to create the schema in development.
"""
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings
from models import Base


def build_engine(url: str | None = None) -> AsyncEngine:
    db_url = (url or settings.effective_database_url or "").strip()
    if not db_url:
        raise RuntimeError(
            "DATABASE_URL is not configured. Set it in the environment or .env file (e.g., DATABASE_URL=postgresql+asyncpg://<user>:<pass>@<host>/<db>)."
        )
    return create_async_engine(db_url, echo=settings.debug)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False)


async def create_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

