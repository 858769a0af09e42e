"""FastAPI dependency wiring for repositories, cache and services."""

from functools import lru_cache

from fastapi import Depends

from app.adapters.cache.memory import InMemoryCacheAdapter
from app.adapters.cache.redis import RedisCacheAdapter
from app.adapters.repositories.sql import (
    SqlContentRepository,
    SqlInteractionRepository,
    SqlUserRepository,
)
from app.config import CacheBackend, settings
from app.database import async_session_factory
from app.ports.cache import CachePort
from app.ports.repositories import (
    ContentRepositoryPort,
    InteractionRepositoryPort,
    UserRepositoryPort,
)
from app.services.cache import CacheService
from app.services.content import ContentService
from app.services.interaction import InteractionService
from app.services.recommendation import RecommendationService


@lru_cache
def get_cache_backend() -> CachePort:
    if settings.cache_backend is CacheBackend.MEMORY:
        return InMemoryCacheAdapter()
    return RedisCacheAdapter.from_url(settings.redis_url)


def get_cache_service(backend: CachePort = Depends(get_cache_backend)) -> CacheService:
    return CacheService(backend)


def get_user_repository() -> UserRepositoryPort:
    return SqlUserRepository(async_session_factory)


def get_content_repository() -> ContentRepositoryPort:
    return SqlContentRepository(async_session_factory)


def get_interaction_repository() -> InteractionRepositoryPort:
    return SqlInteractionRepository(async_session_factory)


def get_content_service(
    contents: ContentRepositoryPort = Depends(get_content_repository),
    cache: CacheService = Depends(get_cache_service),
) -> ContentService:
    return ContentService(contents, cache)


def get_recommendation_service(
    users: UserRepositoryPort = Depends(get_user_repository),
    contents: ContentRepositoryPort = Depends(get_content_repository),
    interactions: InteractionRepositoryPort = Depends(get_interaction_repository),
    cache: CacheService = Depends(get_cache_service),
) -> RecommendationService:
    return RecommendationService(users, contents, interactions, cache)


def get_interaction_service(
    users: UserRepositoryPort = Depends(get_user_repository),
    contents: ContentRepositoryPort = Depends(get_content_repository),
    interactions: InteractionRepositoryPort = Depends(get_interaction_repository),
    content_service: ContentService = Depends(get_content_service),
    cache: CacheService = Depends(get_cache_service),
) -> InteractionService:
    return InteractionService(users, contents, interactions, content_service, cache)
