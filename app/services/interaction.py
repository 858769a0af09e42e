"""Interaction recording and interaction-derived reads."""

import asyncio
import logging
from datetime import datetime, timezone

from app.domain.entities import InteractionRecord, InteractionType, RatingSummary
from app.domain.errors import ContentNotFoundError, UserNotFoundError
from app.ports.repositories import (
    ContentRepositoryPort,
    InteractionRepositoryPort,
    UserRepositoryPort,
)
from app.services.cache import CacheService
from app.services.content import ContentService

logger = logging.getLogger(__name__)

POPULARITY_CONTRIBUTION: dict[InteractionType, int] = {
    InteractionType.VIEW: 1,
    InteractionType.LIKE: 3,
    InteractionType.SHARE: 4,
    InteractionType.COMMENT: 5,
    InteractionType.SAVE: 5,
}
DEFAULT_RATING_CONTRIBUTION = 3


def popularity_delta(type: InteractionType, rating: int | None = None) -> int:
    """Popularity added by one interaction. Ratings contribute their value."""
    if type is InteractionType.RATING:
        return rating if rating else DEFAULT_RATING_CONTRIBUTION
    return POPULARITY_CONTRIBUTION[type]


class InteractionService:
    """Writes interactions and fans out their side effects."""

    def __init__(
        self,
        users: UserRepositoryPort,
        contents: ContentRepositoryPort,
        interactions: InteractionRepositoryPort,
        content_service: ContentService,
        cache: CacheService,
    ) -> None:
        self._users = users
        self._contents = contents
        self._interactions = interactions
        self._content_service = content_service
        self._cache = cache

    async def _require_user(self, user_id: str) -> None:
        if await self._users.find_by_id(user_id) is None:
            raise UserNotFoundError(user_id)

    async def _require_content(self, content_id: str) -> None:
        if await self._contents.find_by_id(content_id) is None:
            raise ContentNotFoundError(content_id)

    async def record_interaction(
        self,
        user_id: str,
        content_id: str,
        type: InteractionType,
        duration: float | None = None,
        comment: str | None = None,
        rating: int | None = None,
    ) -> InteractionRecord:
        """
        Persist an interaction and apply its side effects.

        Both referenced records must exist; a missing one raises before
        anything is written. The popularity increment and the cache
        invalidation are best-effort: their failures are logged and do not
        affect the result once the interaction itself is stored.
        """
        user, content = await asyncio.gather(
            self._users.find_by_id(user_id),
            self._contents.find_by_id(content_id),
        )
        if user is None:
            raise UserNotFoundError(user_id)
        if content is None:
            raise ContentNotFoundError(content_id)

        record = InteractionRecord(
            user_id=user_id,
            content_id=content_id,
            type=type,
            timestamp=datetime.now(timezone.utc),
            duration=duration,
            comment=comment,
            rating=rating,
        )
        delta = popularity_delta(type, rating)

        saved, incremented, invalidated = await asyncio.gather(
            self._interactions.insert(record),
            self._content_service.increment_popularity(content_id, delta),
            self._cache.invalidate_recommendations(user_id),
            return_exceptions=True,
        )
        if isinstance(saved, BaseException):
            raise saved
        for effect, outcome in (
            ("popularity increment", incremented),
            ("recommendation cache invalidation", invalidated),
        ):
            if isinstance(outcome, Exception):
                logger.warning(
                    "Interaction %s stored but %s failed: %s", saved.id, effect, outcome,
                    exc_info=outcome,
                )
            elif isinstance(outcome, BaseException):
                raise outcome
        return saved

    async def get_user_interactions(
        self, user_id: str, type: InteractionType | None = None
    ) -> list[InteractionRecord]:
        """A user's interactions, newest first."""
        await self._require_user(user_id)
        return await self._interactions.find_by_user(user_id, type)

    async def get_content_interactions(
        self, content_id: str, type: InteractionType | None = None
    ) -> list[InteractionRecord]:
        """Interactions on a content item, newest first."""
        await self._require_content(content_id)
        return await self._interactions.find_by_content(content_id, type)

    async def get_content_average_rating(self, content_id: str) -> float | None:
        """Mean rating to one decimal, or None when the content is unrated."""
        return (await self.get_content_rating(content_id)).average

    async def get_content_rating(self, content_id: str) -> RatingSummary:
        ratings = await self.get_content_interactions(content_id, InteractionType.RATING)
        if not ratings:
            return RatingSummary(average=None, count=0)
        total = sum(r.rating or 0 for r in ratings)
        return RatingSummary(average=round(total / len(ratings), 1), count=len(ratings))
