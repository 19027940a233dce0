from src.core.cache.backend.interface import CacheBackend
from src.core.cache.backend.memory_backend import InMemoryCacheBackend
from src.core.cache.backend.redis_backend import RedisCacheBackend
from src.main.config import CacheConfig


def create_cache_backend(cache_config: CacheConfig) -> CacheBackend:
    """
    Build the cache backend selected by CACHE_BACKEND. The Redis backend is
    returned unconnected; ``on_cache_startup`` opens the connection.
    """
    if cache_config.CACHE_BACKEND == "redis":
        return RedisCacheBackend()
    return InMemoryCacheBackend()


def build_cache_key(cache_config: CacheConfig, *parts: object) -> str:
    return ":".join([cache_config.CACHE_KEY_PREFIX, *(str(part) for part in parts)])
