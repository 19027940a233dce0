from typing import cast

from fastapi import Request

from src.core.cache.backend.interface import CacheBackend


async def get_cache_backend(request: Request) -> CacheBackend:
    """
    Provide the application cache backend stored on app.state.
    """
    backend = getattr(request.app.state, "cache_backend", None)
    if backend is None:
        raise RuntimeError(
            "Cache backend is not initialized. Ensure get_application() built it."
        )
    return cast(CacheBackend, backend)
