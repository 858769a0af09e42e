"""SQLAlchemy implementations of the repository ports.

Every call opens its own session so independent lookups can run concurrently
under ``asyncio.gather``; an ``AsyncSession`` must never be shared between
concurrent tasks.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.domain.entities import (
    ContentFilter,
    ContentItem,
    ContentSort,
    ContentType,
    InteractionRecord,
    InteractionType,
    SortField,
    SortOrder,
    UserProfile,
    UserRole,
)
from app.domain.errors import StoreUnavailableError
from app.domain.models import Content, ContentTag, Interaction, User
from app.ports.repositories import (
    ContentRepositoryPort,
    InteractionRepositoryPort,
    UserRepositoryPort,
)

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    SortField.TITLE: Content.title,
    SortField.CREATED_AT: Content.created_at,
    SortField.POPULARITY: Content.popularity,
}


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything stored is UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def content_to_entity(row: Content) -> ContentItem:
    return ContentItem(
        id=row.id,
        title=row.title,
        type=ContentType(row.type),
        tags=[t.tag for t in row.tags],
        popularity=row.popularity,
        created_at=_as_utc(row.created_at),
    )


def interaction_to_entity(row: Interaction) -> InteractionRecord:
    return InteractionRecord(
        id=row.id,
        user_id=row.user_id,
        content_id=row.content_id,
        type=InteractionType(row.type),
        timestamp=_as_utc(row.timestamp),
        duration=row.duration,
        comment=row.comment,
        rating=row.rating,
    )


class _SqlRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error("Database operation failed: %s", exc)
            raise StoreUnavailableError(str(exc)) from exc


class SqlUserRepository(_SqlRepository, UserRepositoryPort):
    async def find_by_id(self, user_id: str) -> UserProfile | None:
        async with self._session() as session:
            row = await session.get(User, user_id)
            if row is None:
                return None
            return UserProfile(
                id=row.id,
                role=UserRole(row.role),
                preferences=list(row.preferences or []),
            )


class SqlContentRepository(_SqlRepository, ContentRepositoryPort):
    @staticmethod
    def _conditions(predicate: ContentFilter) -> list:
        conditions = []
        if predicate.id_in is not None:
            conditions.append(Content.id.in_(predicate.id_in))
        if predicate.id_not_in:
            conditions.append(Content.id.not_in(predicate.id_not_in))
        if predicate.type is not None:
            conditions.append(Content.type == predicate.type.value)
        if predicate.tags_any_of:
            conditions.append(
                Content.id.in_(
                    select(ContentTag.content_id).where(
                        ContentTag.tag.in_(predicate.tags_any_of)
                    )
                )
            )
        return conditions

    async def find_by_id(self, content_id: str) -> ContentItem | None:
        async with self._session() as session:
            row = await session.get(Content, content_id)
            return content_to_entity(row) if row is not None else None

    async def find_many(
        self,
        predicate: ContentFilter,
        sort: list[ContentSort] | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> tuple[list[ContentItem], int]:
        conditions = self._conditions(predicate)
        order_by = []
        for s in sort or [ContentSort()]:
            column = _SORT_COLUMNS[s.field]
            order_by.append(column.asc() if s.order is SortOrder.ASC else column.desc())
        # Tiebreak on id so pages are deterministic.
        order_by.append(Content.id.asc())

        stmt = select(Content).where(*conditions).order_by(*order_by).offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)
        count_stmt = select(func.count()).select_from(Content).where(*conditions)

        async with self._session() as session:
            total = (await session.execute(count_stmt)).scalar_one()
            rows = (await session.execute(stmt)).scalars().all()
            return [content_to_entity(r) for r in rows], total

    async def increment_popularity(self, content_id: str, delta: int) -> ContentItem | None:
        async with self._session() as session:
            async with session.begin():
                result = await session.execute(
                    update(Content)
                    .where(Content.id == content_id)
                    .values(popularity=Content.popularity + delta)
                )
                if result.rowcount == 0:
                    return None
                row = await session.get(Content, content_id)
                return content_to_entity(row)


class SqlInteractionRepository(_SqlRepository, InteractionRepositoryPort):
    async def _find(self, *conditions) -> list[InteractionRecord]:
        stmt = (
            select(Interaction)
            .where(*conditions)
            .order_by(Interaction.timestamp.desc(), Interaction.id.asc())
        )
        async with self._session() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [interaction_to_entity(r) for r in rows]

    async def find_by_user(
        self, user_id: str, type: InteractionType | None = None
    ) -> list[InteractionRecord]:
        conditions = [Interaction.user_id == user_id]
        if type is not None:
            conditions.append(Interaction.type == type.value)
        return await self._find(*conditions)

    async def find_by_content(
        self, content_id: str, type: InteractionType | None = None
    ) -> list[InteractionRecord]:
        conditions = [Interaction.content_id == content_id]
        if type is not None:
            conditions.append(Interaction.type == type.value)
        return await self._find(*conditions)

    async def insert(self, interaction: InteractionRecord) -> InteractionRecord:
        row = Interaction(
            user_id=interaction.user_id,
            content_id=interaction.content_id,
            type=interaction.type.value,
            timestamp=interaction.timestamp,
            duration=interaction.duration,
            comment=interaction.comment,
            rating=interaction.rating,
        )
        async with self._session() as session:
            async with session.begin():
                session.add(row)
                await session.flush()
                saved = interaction_to_entity(row)
        logger.info(
            "Stored %s interaction %s (user=%s, content=%s)",
            saved.type.value, saved.id, saved.user_id, saved.content_id,
        )
        return saved
