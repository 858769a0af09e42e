"""Cache port — key/value store with per-key expiry."""

from abc import ABC, abstractmethod


class CachePort(ABC):
    """Abstraction for the cache backend.

    Implementations raise ``CacheUnavailableError`` when the backend cannot be
    reached; callers go through ``CacheService``, which swallows those.
    """

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        ...

    @abstractmethod
    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        ...
