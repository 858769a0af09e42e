import os
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

# Point the application at throwaway backends before anything imports app.config.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("CACHE_BACKEND", "memory")

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.adapters.cache.memory import InMemoryCacheAdapter
from app.adapters.repositories.sql import (
    SqlContentRepository,
    SqlInteractionRepository,
    SqlUserRepository,
)
from app.domain.errors import CacheUnavailableError
from app.domain.models import Base, Content, ContentTag, Interaction, User
from app.ports.cache import CachePort
from app.services.cache import CacheService
from app.services.content import ContentService
from app.services.interaction import InteractionService
from app.services.recommendation import RecommendationService


@pytest.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """A fresh SQLite file database per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    # Take the write lock up front so concurrent writers wait instead of deadlocking.
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
def cache_backend() -> InMemoryCacheAdapter:
    return InMemoryCacheAdapter()


@pytest.fixture
def cache(cache_backend: InMemoryCacheAdapter) -> CacheService:
    return CacheService(cache_backend)


@pytest.fixture
def users(session_factory) -> SqlUserRepository:
    return SqlUserRepository(session_factory)


@pytest.fixture
def contents(session_factory) -> SqlContentRepository:
    return SqlContentRepository(session_factory)


@pytest.fixture
def interactions(session_factory) -> SqlInteractionRepository:
    return SqlInteractionRepository(session_factory)


@pytest.fixture
def content_service(contents, cache) -> ContentService:
    return ContentService(contents, cache)


@pytest.fixture
def recommendation_service(users, contents, interactions, cache) -> RecommendationService:
    return RecommendationService(users, contents, interactions, cache)


@pytest.fixture
def interaction_service(
    users, contents, interactions, content_service, cache
) -> InteractionService:
    return InteractionService(users, contents, interactions, content_service, cache)


class UnavailableCache(CachePort):
    """Cache backend that is always down."""

    async def get(self, key: str) -> bytes | None:
        raise CacheUnavailableError("connection refused")

    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        raise CacheUnavailableError("connection refused")

    async def delete(self, key: str) -> None:
        raise CacheUnavailableError("connection refused")


# ── Seeding ────────────────────────────────────────


class Seeder:
    """Writes rows straight into the test database."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def _add(self, row) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                session.add(row)

    async def user(self, user_id: str, preferences: list[str] | None = None, role: str = "user") -> str:
        await self._add(
            User(id=user_id, username=user_id, role=role, preferences=preferences or [])
        )
        return user_id

    async def content(
        self,
        content_id: str,
        type: str = "article",
        tags: list[str] | None = None,
        popularity: int = 0,
        age_days: float = 0,
        title: str | None = None,
    ) -> str:
        await self._add(
            Content(
                id=content_id,
                title=title or f"Title {content_id}",
                type=type,
                popularity=popularity,
                created_at=datetime.now(timezone.utc) - timedelta(days=age_days),
                tags=[ContentTag(tag=t, position=i) for i, t in enumerate(tags or [])],
            )
        )
        return content_id

    async def interaction(
        self,
        user_id: str,
        content_id: str,
        type: str = "like",
        age_days: float = 0,
        rating: int | None = None,
    ) -> None:
        await self._add(
            Interaction(
                user_id=user_id,
                content_id=content_id,
                type=type,
                timestamp=datetime.now(timezone.utc) - timedelta(days=age_days),
                rating=rating,
            )
        )


@pytest.fixture
def seed(session_factory) -> Seeder:
    return Seeder(session_factory)
