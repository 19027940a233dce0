from abc import ABC, abstractmethod
from typing import Any


class CacheBackend(ABC):
    @abstractmethod
    async def get_value(self, key: str) -> Any:
        """Retrieve a value from the cache by its key."""
        raise NotImplementedError

    @abstractmethod
    async def set_value(self, key: str, value: Any, ttl: int) -> None:
        """Store a value in the cache with a specified time-to-live (ttl) in seconds."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete a value from the cache by its key."""
        raise NotImplementedError

    @abstractmethod
    def is_initialized(self) -> bool:
        """Check if the cache backend is ready to serve requests."""
        raise NotImplementedError
