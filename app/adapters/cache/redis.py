"""Redis cache adapter."""

import logging
from functools import wraps

from redis import RedisError
from redis.asyncio import Redis

from app.domain.errors import CacheUnavailableError
from app.ports.cache import CachePort

logger = logging.getLogger(__name__)


def handle_redis_errors(func):
    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except RedisError as exc:
            logger.error("Redis error in %s: %s", func.__name__, exc)
            raise CacheUnavailableError(str(exc)) from exc

    return wrapper


class RedisCacheAdapter(CachePort):
    """Cache entries in Redis using native key expiry."""

    def __init__(self, client: Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCacheAdapter":
        logger.info("Redis cache configured: %s", url)
        return cls(Redis.from_url(url, decode_responses=False))

    @handle_redis_errors
    async def get(self, key: str) -> bytes | None:
        return await self._client.get(key)

    @handle_redis_errors
    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        await self._client.set(key, value, ex=ttl_seconds)

    @handle_redis_errors
    async def delete(self, key: str) -> None:
        await self._client.delete(key)

    async def close(self) -> None:
        await self._client.aclose()
