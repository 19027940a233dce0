from __future__ import annotations

from unittest.mock import AsyncMock, Mock

from fastapi import FastAPI
import pytest

from src.main import lifespan as lifespan_module
from src.main.config import config
from src.main.lifespan import lifespan


@pytest.mark.asyncio
async def test_lifespan_initializes_and_shutdowns(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    init_sentry = Mock()
    cache_startup = AsyncMock()
    cache_shutdown = AsyncMock()

    monkeypatch.setattr(lifespan_module, "init_sentry", init_sentry)
    monkeypatch.setattr(lifespan_module, "on_cache_startup", cache_startup)
    monkeypatch.setattr(lifespan_module, "on_cache_shutdown", cache_shutdown)

    app = FastAPI()
    async with lifespan(app):
        cache_startup.assert_awaited_once_with(app, config.redis.dsn)
        cache_shutdown.assert_not_awaited()

    init_sentry.assert_called_once()
    cache_shutdown.assert_awaited_once_with(app)
