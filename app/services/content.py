"""Catalog reads and the popularity counter."""

import logging

from pydantic import TypeAdapter

from app.domain.entities import (
    ContentFilter,
    ContentItem,
    ContentPage,
    ContentSort,
    ContentType,
    SortField,
    SortOrder,
)
from app.domain.errors import ContentNotFoundError
from app.ports.repositories import ContentRepositoryPort
from app.services.cache import CONTENT_ITEM, CONTENT_LIST, CacheService
from app.services.cache_policy import (
    CacheNamespace,
    content_filter_key,
    content_key,
    content_list_key,
    ttl_for,
)

logger = logging.getLogger(__name__)

CONTENT_PAGE = TypeAdapter(ContentPage)

# Most popular first, newest breaking ties.
POPULARITY_THEN_RECENCY = [
    ContentSort(SortField.POPULARITY, SortOrder.DESC),
    ContentSort(SortField.CREATED_AT, SortOrder.DESC),
]


class ContentService:
    def __init__(self, contents: ContentRepositoryPort, cache: CacheService) -> None:
        self._contents = contents
        self._cache = cache

    async def get_content(self, content_id: str) -> ContentItem:
        content = await self._contents.find_by_id(content_id)
        if content is None:
            raise ContentNotFoundError(content_id)
        return content

    async def list_content(
        self,
        type: ContentType | None = None,
        tags: list[str] | None = None,
        skip: int = 0,
        limit: int = 10,
        sort_field: SortField = SortField.CREATED_AT,
        sort_order: SortOrder = SortOrder.DESC,
    ) -> ContentPage:
        """Paginated catalog listing with the total match count."""
        key = content_list_key(type, tags, skip, limit, sort_field, sort_order)
        cached = await self._cache.get(key, CONTENT_PAGE)
        if cached is not None:
            return cached

        items, total = await self._contents.find_many(
            ContentFilter(type=type, tags_any_of=tags or None),
            sort=[ContentSort(sort_field, sort_order)],
            skip=skip,
            limit=limit,
        )
        page = ContentPage(items=items, total=total)
        await self._cache.set(key, page, CONTENT_PAGE, ttl_for(CacheNamespace.CONTENT_LIST))
        return page

    async def search_content(
        self, type: ContentType, skip: int = 0, limit: int = 10
    ) -> list[ContentItem]:
        """Content of one type, most popular first."""
        key = content_filter_key(type, skip, limit)
        cached = await self._cache.get(key, CONTENT_LIST)
        if cached is not None:
            return cached

        items, _ = await self._contents.find_many(
            ContentFilter(type=type),
            sort=POPULARITY_THEN_RECENCY,
            skip=skip,
            limit=limit,
        )
        await self._cache.set(key, items, CONTENT_LIST, ttl_for(CacheNamespace.CONTENT_FILTER))
        return items

    async def increment_popularity(self, content_id: str, amount: int = 1) -> ContentItem | None:
        """Atomically bump popularity and refresh the cached snapshot."""
        content = await self._contents.increment_popularity(content_id, amount)
        if content is None:
            logger.warning("Popularity increment skipped, content %s is gone", content_id)
            return None
        await self._cache.set(
            content_key(content_id), content, CONTENT_ITEM, ttl_for(CacheNamespace.CONTENT)
        )
        return content
