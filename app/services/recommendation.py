"""Personalized recommendation retrieval with cache-aside."""

import asyncio
import logging

from app.domain.entities import (
    ContentFilter,
    ContentItem,
    ContentType,
    RecommendationOptions,
)
from app.domain.errors import UserNotFoundError
from app.ports.recommender import RecommenderPort
from app.ports.repositories import (
    ContentRepositoryPort,
    InteractionRepositoryPort,
    UserRepositoryPort,
)
from app.services.cache import CONTENT_LIST, CacheService
from app.services.cache_policy import (
    CacheNamespace,
    filtered_content_key,
    recommendations_key,
    ttl_for,
)
from app.services.content import POPULARITY_THEN_RECENCY
from app.services.scoring import enrich, rank

logger = logging.getLogger(__name__)


class RecommendationService(RecommenderPort):
    """Ranks un-interacted content for a user and caches the result."""

    def __init__(
        self,
        users: UserRepositoryPort,
        contents: ContentRepositoryPort,
        interactions: InteractionRepositoryPort,
        cache: CacheService,
    ) -> None:
        self._users = users
        self._contents = contents
        self._interactions = interactions
        self._cache = cache

    async def _load_contents(self, content_ids: list[str]) -> dict[str, ContentItem]:
        """Batch-resolve content by id into a request-local lookup."""
        if not content_ids:
            return {}
        items, _ = await self._contents.find_many(ContentFilter(id_in=content_ids))
        return {item.id: item for item in items}

    async def get_recommendations(
        self,
        user_id: str,
        options: RecommendationOptions | None = None,
    ) -> list[ContentItem]:
        """
        Return up to ``options.limit`` content items ranked for ``user_id``.

        Served from cache when a non-empty result for the same query exists.
        Raises UserNotFoundError for an unknown user; an empty candidate pool
        yields an empty list.
        """
        options = options or RecommendationOptions()
        key = recommendations_key(user_id, options)

        cached = await self._cache.get(key, CONTENT_LIST)
        if cached:
            logger.debug("Serving %d cached recommendations for user %s", len(cached), user_id)
            return cached

        user, interactions = await asyncio.gather(
            self._users.find_by_id(user_id),
            self._interactions.find_by_user(user_id),
        )
        if user is None:
            raise UserNotFoundError(user_id)

        interacted_ids = list(dict.fromkeys(i.content_id for i in interactions))
        interacted = await self._load_contents(interacted_ids)

        excluded = list(dict.fromkeys([*interacted_ids, *(options.skip_content_ids or [])]))
        candidates, _ = await self._contents.find_many(
            ContentFilter(
                id_not_in=excluded or None,
                type=options.type,
                tags_any_of=options.tags or None,
            )
        )
        if not candidates:
            logger.info("No candidate content left for user %s", user_id)
            return []

        history = enrich(interactions, interacted)
        ranked = rank(candidates, user, history)
        recommendations = [entry.content for entry in ranked[: options.limit]]

        if recommendations:
            await self._cache.store_recommendations(user_id, key, recommendations)
        logger.info(
            "Ranked %d candidates for user %s (history=%d), returning %d",
            len(candidates), user_id, len(history), len(recommendations),
        )
        return recommendations

    async def filter_content(
        self,
        type: ContentType | None = None,
        tags: list[str] | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> list[ContentItem]:
        """Non-personalized catalog filter, most popular and newest first."""
        key = filtered_content_key(type, tags, limit, offset)
        cached = await self._cache.get(key, CONTENT_LIST)
        if cached:
            return cached

        items, _ = await self._contents.find_many(
            ContentFilter(type=type, tags_any_of=tags or None),
            sort=POPULARITY_THEN_RECENCY,
            skip=offset,
            limit=limit,
        )
        if items:
            await self._cache.set(
                key, items, CONTENT_LIST, ttl_for(CacheNamespace.FILTERED_CONTENT)
            )
        return items
