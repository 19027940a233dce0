import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sentry_sdk.integrations.asgi import SentryAsgiMiddleware

from loggers import get_logger
from src.core.cache.backend.interface import CacheBackend
from src.core.cache.core import build_cache_key, create_cache_backend
from src.core.middleware import register_middlewares
from src.main.config import config
from src.main.lifespan import lifespan
from src.main.presentation import include_exceptions_handlers, include_routers
from src.main.route_logging import log_routes_summary
from src.user.auth.gateway import register_session_gateway
from src.user.auth.verification_cache import TokenVerificationCache

logging.getLogger("uvicorn.access").disabled = True
logger = get_logger(__name__)


def get_application(cache_backend: CacheBackend | None = None) -> FastAPI:
    application = FastAPI(
        title=config.app.PROJECT_NAME,
        debug=config.app.DEBUG,
        version=config.app.VERSION,
        lifespan=lifespan,
    )

    # Shared cache for token verifications and short-lived data
    backend = cache_backend or create_cache_backend(config.cache)
    verification_cache = TokenVerificationCache(
        backend,
        ttl_seconds=config.cache.TOKEN_VERIFICATION_CACHE_TTL_SECONDS,
        key_prefix=build_cache_key(config.cache, "session-verification"),
    )
    application.state.cache_backend = backend
    application.state.token_verification_cache = verification_cache

    # Session gateway sits innermost so error middlewares wrap it
    register_session_gateway(
        application, verification_cache, cookie_name=config.cookie.AUTH_COOKIE_NAME
    )

    # Register custom middlewares
    register_middlewares(application)

    # CORS
    application.add_middleware(
        CORSMiddleware,  # noqa
        allow_origins=config.app.CORS_ALLOWED_ORIGINS,
        allow_credentials=config.app.CORS_ALLOW_CREDENTIALS,
        allow_methods=config.app.CORS_ALLOWED_METHODS,
        allow_headers=config.app.CORS_ALLOWED_HEADERS,
        expose_headers=config.app.CORS_EXPOSE_HEADERS,
    )

    # Custom exceptions
    include_exceptions_handlers(application)

    # Routers
    include_routers(application)
    log_routes_summary(application, include_debug_list=config.app.DEBUG)

    # Sentry middleware for error tracking
    application.add_middleware(SentryAsgiMiddleware)

    return application


app = get_application()
