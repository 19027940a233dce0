from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.core.cache.lifecycle import on_cache_shutdown, on_cache_startup
from src.main.config import config
from src.main.sentry import init_sentry


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    init_sentry()
    await on_cache_startup(app, config.redis.dsn)

    yield

    await on_cache_shutdown(app)
