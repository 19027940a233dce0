import sentry_sdk
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from loggers import get_logger
from src.core.cache.backend.interface import CacheBackend
from src.core.errors.exceptions import InfrastructureException
from src.system.schemas import HealthCheckResponse

HEALTH_CHECK_KEY = "health:check"


class HealthService:
    def __init__(self, cache_backend: CacheBackend) -> None:
        self.cache_backend = cache_backend
        self.logger = get_logger(__name__)

    async def get_status(self, session: AsyncSession) -> HealthCheckResponse:
        cache_is_ok = await self._check_cache()
        postgres_is_ok = await self._check_postgres(session)
        if not cache_is_ok or not postgres_is_ok:
            raise InfrastructureException(
                "System health check failed",
                additional_info={"cache": cache_is_ok, "postgres": postgres_is_ok},
            )
        return HealthCheckResponse(
            status="ok", cache_backend=type(self.cache_backend).__name__
        )

    async def _check_cache(self) -> bool:
        if not self.cache_backend.is_initialized():
            self.logger.error("Cache health check failed: backend not initialized")
            return False
        try:
            await self.cache_backend.set_value(HEALTH_CHECK_KEY, b"1", 5)
            return await self.cache_backend.get_value(HEALTH_CHECK_KEY) is not None
        except Exception as exc:
            self.logger.error("Cache health check failed", exc_info=exc)
            sentry_sdk.capture_exception(exc)
            return False

    async def _check_postgres(self, session: AsyncSession) -> bool:
        try:
            await session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as exc:
            self.logger.error("Postgres health check failed", exc_info=exc)
            sentry_sdk.capture_exception(exc)
            return False
