"""
Cache key derivation and per-namespace TTLs.

Keys have the shape ``{namespace}[:{subject}][:{options}]`` where ``options``
is a canonical JSON rendering of the query: keys sorted, unset fields dropped,
list values de-duplicated and sorted. Two option sets that differ only in
construction order map to the same key. Pure functions, no I/O.
"""

import json
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from app.config import settings
from app.domain.entities import (
    ContentType,
    RecommendationOptions,
    SortField,
    SortOrder,
)


class CacheNamespace(str, Enum):
    RECOMMENDATIONS = "recommendations"
    FILTERED_CONTENT = "filteredContent"
    CONTENT_LIST = "content:list"
    CONTENT_FILTER = "content:filter"
    CONTENT = "content"


TTL_SECONDS: dict[CacheNamespace, int] = {
    CacheNamespace.RECOMMENDATIONS: 30 * 60,
    CacheNamespace.FILTERED_CONTENT: 15 * 60,
    CacheNamespace.CONTENT_LIST: 15 * 60,
    CacheNamespace.CONTENT_FILTER: 10 * 60,
    CacheNamespace.CONTENT: 30 * 60,
}


def ttl_for(namespace: CacheNamespace) -> int:
    return TTL_SECONDS[namespace]


def _normalize(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple, set, frozenset)):
        return sorted({_normalize(v) for v in value})
    return value


def canonical_options(options: Mapping[str, Any]) -> str:
    """Render options as order-independent JSON; empty string when nothing is set."""
    cleaned = {
        name: _normalize(value)
        for name, value in options.items()
        if value is not None and value != [] and value != ()
    }
    if not cleaned:
        return ""
    return json.dumps(cleaned, sort_keys=True, separators=(",", ":"))


def _compose(*parts: str) -> str:
    return ":".join(p for p in parts if p)


def recommendations_key(user_id: str, options: RecommendationOptions) -> str:
    """Key for one recommendation query.

    The configured default limit with no filters collapses to the base
    ``recommendations:{user_id}`` key.
    """
    limit = options.limit
    if limit == settings.default_recommendation_limit:
        limit = None
    rendered = canonical_options(
        {
            "limit": limit,
            "type": options.type,
            "tags": options.tags,
            "skipContentIds": options.skip_content_ids,
        }
    )
    return _compose(CacheNamespace.RECOMMENDATIONS.value, user_id, rendered)


def recommendations_base_key(user_id: str) -> str:
    return _compose(CacheNamespace.RECOMMENDATIONS.value, user_id)


def recommendations_index_key(user_id: str) -> str:
    """Entry listing every recommendation key issued for ``user_id``."""
    return _compose(CacheNamespace.RECOMMENDATIONS.value, user_id, "index")


def filtered_content_key(
    type: ContentType | None,
    tags: Iterable[str] | None,
    limit: int,
    offset: int,
) -> str:
    rendered = canonical_options(
        {"type": type, "tags": list(tags) if tags else None, "limit": limit, "offset": offset}
    )
    return _compose(CacheNamespace.FILTERED_CONTENT.value, rendered)


def content_list_key(
    type: ContentType | None,
    tags: Iterable[str] | None,
    skip: int,
    limit: int,
    sort_field: SortField,
    sort_order: SortOrder,
) -> str:
    rendered = canonical_options(
        {
            "type": type,
            "tags": list(tags) if tags else None,
            "skip": skip,
            "limit": limit,
            "sortField": sort_field,
            "sortOrder": sort_order,
        }
    )
    return _compose(CacheNamespace.CONTENT_LIST.value, rendered)


def content_filter_key(type: ContentType, skip: int, limit: int) -> str:
    rendered = canonical_options({"skip": skip, "limit": limit})
    return _compose(CacheNamespace.CONTENT_FILTER.value, type.value, rendered)


def content_key(content_id: str) -> str:
    return _compose(CacheNamespace.CONTENT.value, content_id)
