from collections.abc import Callable
import time
from typing import Any

from src.core.cache.backend.interface import CacheBackend


class InMemoryCacheBackend(CacheBackend):
    """
    Process-local cache with per-key expiry.

    Every read and write sweeps expired entries first, so the store never grows
    beyond the keys touched within the last TTL window. Concurrent writers on the
    same key follow last-writer-wins.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._store: dict[str, tuple[Any, float]] = {}

    def sweep(self) -> int:
        """Drop every expired entry. Returns how many entries were removed."""
        now = self._clock()
        expired = [
            key for key, (_, expires_at) in self._store.items() if expires_at <= now
        ]
        for key in expired:
            del self._store[key]
        return len(expired)

    async def get_value(self, key: str) -> Any:
        self.sweep()
        entry = self._store.get(key)
        if entry is None:
            return None
        return entry[0]

    async def set_value(self, key: str, value: Any, ttl: int) -> None:
        self.sweep()
        self._store[key] = (value, self._clock() + ttl)

    async def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def is_initialized(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self._store)
