import time

from app.ports.cache import CachePort


class InMemoryCacheAdapter(CachePort):
    """
    Process-local cache for development and tests.

    Expired entries are dropped when read and swept on every write.
    Not shared between worker processes.
    """

    def __init__(self, clock=time.monotonic) -> None:
        self._entries: dict[str, tuple[bytes, float]] = {}
        self._clock = clock

    async def get(self, key: str) -> bytes | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        now = self._clock()
        expired = [k for k, (_, expires_at) in self._entries.items() if now >= expires_at]
        for k in expired:
            del self._entries[k]
        self._entries[key] = (value, now + ttl_seconds)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def keys(self) -> list[str]:
        """Keys currently held, expired or not. Used by tests."""
        return list(self._entries)
