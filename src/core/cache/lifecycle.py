from fastapi import FastAPI

from loggers import get_logger
from src.core.cache.backend.redis_backend import RedisCacheBackend

logger = get_logger("cache")


async def on_cache_startup(app: FastAPI, redis_dsn: str) -> None:
    backend = getattr(app.state, "cache_backend", None)
    if isinstance(backend, RedisCacheBackend):
        await backend.connect(redis_dsn)
        logger.info("Redis cache backend connected.")
    elif backend is not None:
        logger.info("Using %s.", type(backend).__name__)


async def on_cache_shutdown(app: FastAPI) -> None:
    backend = getattr(app.state, "cache_backend", None)
    if isinstance(backend, RedisCacheBackend):
        logger.info("Redis cache backend shutting down...")
        await backend.close()
