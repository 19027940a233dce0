from __future__ import annotations

from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy.exc import SQLAlchemyError

from src.core.errors.exceptions import InfrastructureException
from src.system.services import HEALTH_CHECK_KEY, HealthService
from tests.fakes.cache import FakeCacheBackend
from tests.fakes.db import FakeAsyncSession


class BrokenCacheBackend(FakeCacheBackend):
    async def set_value(self, key: str, value, ttl: int) -> None:
        raise RuntimeError("down")


@pytest.fixture
def sentry_mock(monkeypatch: pytest.MonkeyPatch) -> Mock:
    capture = Mock()
    monkeypatch.setattr("src.system.services.sentry_sdk.capture_exception", capture)
    return capture


@pytest.mark.asyncio
async def test_health_service_ok(sentry_mock: Mock) -> None:
    session = FakeAsyncSession()
    backend = FakeCacheBackend()
    service = HealthService(cache_backend=backend)

    result = await service.get_status(session=session)

    assert result.status == "ok"
    assert result.cache_backend == "FakeCacheBackend"
    assert backend.set_calls == [(HEALTH_CHECK_KEY, 5)]
    session.execute.assert_awaited_once()
    sentry_mock.assert_not_called()


@pytest.mark.asyncio
async def test_health_service_cache_not_initialized(sentry_mock: Mock) -> None:
    service = HealthService(cache_backend=FakeCacheBackend(initialized=False))

    with pytest.raises(InfrastructureException) as exc_info:
        await service.get_status(session=FakeAsyncSession())

    assert exc_info.value.additional_info == {"cache": False, "postgres": True}
    sentry_mock.assert_not_called()


@pytest.mark.asyncio
async def test_health_service_cache_failure(sentry_mock: Mock) -> None:
    service = HealthService(cache_backend=BrokenCacheBackend())

    with pytest.raises(InfrastructureException):
        await service.get_status(session=FakeAsyncSession())

    sentry_mock.assert_called_once()


@pytest.mark.asyncio
async def test_health_service_postgres_failure(sentry_mock: Mock) -> None:
    session = FakeAsyncSession()
    session.execute = AsyncMock(side_effect=SQLAlchemyError("fail"))
    service = HealthService(cache_backend=FakeCacheBackend())

    with pytest.raises(InfrastructureException) as exc_info:
        await service.get_status(session=session)

    assert exc_info.value.additional_info == {"cache": True, "postgres": False}
    sentry_mock.assert_called_once()
