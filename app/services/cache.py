"""Cache-aside helper around the cache port.

Every call is guarded: a backend failure or an undecodable entry is logged
and treated as a miss (reads) or a no-op (writes, deletes).
"""

import asyncio
import logging
from typing import TypeVar

from pydantic import TypeAdapter, ValidationError

from app.domain.entities import ContentItem
from app.domain.errors import CacheUnavailableError
from app.ports.cache import CachePort
from app.services.cache_policy import (
    CacheNamespace,
    recommendations_base_key,
    recommendations_index_key,
    ttl_for,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONTENT_LIST = TypeAdapter(list[ContentItem])
CONTENT_ITEM = TypeAdapter(ContentItem)
KEY_LIST = TypeAdapter(list[str])


class CacheService:
    def __init__(self, backend: CachePort) -> None:
        self._backend = backend

    async def get(self, key: str, codec: TypeAdapter[T]) -> T | None:
        try:
            raw = await self._backend.get(key)
        except CacheUnavailableError as exc:
            logger.warning("Cache read failed for %s: %s", key, exc)
            return None
        if raw is None:
            logger.debug("Cache miss: %s", key)
            return None
        try:
            value = codec.validate_json(raw)
        except ValidationError as exc:
            logger.warning("Discarding undecodable cache entry %s: %s", key, exc)
            return None
        logger.debug("Cache hit: %s", key)
        return value

    async def set(self, key: str, value: T, codec: TypeAdapter[T], ttl_seconds: int) -> None:
        try:
            await self._backend.set(key, codec.dump_json(value), ttl_seconds)
        except CacheUnavailableError as exc:
            logger.warning("Cache write failed for %s: %s", key, exc)

    async def delete(self, *keys: str) -> None:
        await asyncio.gather(*(self._delete_one(k) for k in keys))

    async def _delete_one(self, key: str) -> None:
        try:
            await self._backend.delete(key)
        except CacheUnavailableError as exc:
            logger.warning("Cache delete failed for %s: %s", key, exc)

    # ── Recommendation sets ────────────────────────

    async def store_recommendations(
        self, user_id: str, key: str, items: list[ContentItem]
    ) -> None:
        """Cache a recommendation set and record its key in the user's index."""
        ttl = ttl_for(CacheNamespace.RECOMMENDATIONS)
        await self.set(key, items, CONTENT_LIST, ttl)

        index_key = recommendations_index_key(user_id)
        issued = await self.get(index_key, KEY_LIST) or []
        if key not in issued:
            issued.append(key)
        # Same TTL as the entries it lists, refreshed on every write.
        await self.set(index_key, issued, KEY_LIST, ttl)

    async def invalidate_recommendations(self, user_id: str) -> None:
        """Drop every cached recommendation set issued for ``user_id``."""
        index_key = recommendations_index_key(user_id)
        issued = await self.get(index_key, KEY_LIST) or []
        keys = dict.fromkeys([recommendations_base_key(user_id), *issued, index_key])
        await self.delete(*keys)
        logger.debug("Invalidated %d recommendation keys for user %s", len(keys), user_id)
