"""Async engine and session factory."""

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from app.config import settings
from app.domain.models import Base

engine = create_async_engine(settings.database_url, pool_pre_ping=True)

async_session_factory = async_sessionmaker(engine, expire_on_commit=False)


async def create_tables(bind: AsyncEngine = engine) -> None:
    """Create all tables that do not exist yet."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
