# sellerdesk/db/session.py
# -----------------------------------------------------------------------------
# SQLAlchemy async engine / session / base
# - injected into routers with FastAPI Depends(get_session)
# - SQLite by default, Postgres (asyncpg) by changing DATABASE_URL
# -----------------------------------------------------------------------------
from collections.abc import AsyncGenerator
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import declarative_base

from sellerdesk.core.config import settings

engine = create_async_engine(settings.async_database_url, echo=False, future=True)
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)
Base = declarative_base()


async def init_models() -> None:
    """Create every table (safe to call repeatedly)."""
    from sellerdesk.db import models  # noqa: F401  registers the tables

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Request scoped session"""
    async with AsyncSessionLocal() as session:
        yield session
