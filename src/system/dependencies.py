from fastapi import Depends

from src.core.cache.backend.interface import CacheBackend
from src.core.cache.dependencies import get_cache_backend
from src.system.services import HealthService


async def get_health_service(
    cache_backend: CacheBackend = Depends(get_cache_backend),
) -> HealthService:
    return HealthService(cache_backend=cache_backend)
