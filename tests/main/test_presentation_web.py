from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sentry_sdk.integrations.asgi import SentryAsgiMiddleware

from src.core.cache.backend.memory_backend import InMemoryCacheBackend
from src.core.errors.exceptions import (
    InfrastructureException,
    InstanceNotFoundException,
    UnauthorizedException,
)
from src.main.config import config
from src.main.presentation import include_exceptions_handlers, include_routers
from src.main.web import get_application
from src.user.auth.verification_cache import TokenVerificationCache


def test_include_routers_registers_expected_paths() -> None:
    app = FastAPI()
    include_routers(app)

    paths = {route.path for route in app.router.routes}

    assert "/api/auth/otp/send" in paths
    assert "/api/auth/otp/verify" in paths
    assert "/api/auth/refresh-token" in paths
    assert "/api/auth/session" in paths
    assert "/api/users/me" in paths
    assert "/api/users/exists" in paths
    assert "/health/" in paths
    assert "/time/" in paths


def test_include_exceptions_handlers_registers_handlers() -> None:
    app = FastAPI()
    include_exceptions_handlers(app)

    assert UnauthorizedException in app.exception_handlers
    assert InstanceNotFoundException in app.exception_handlers
    assert InfrastructureException in app.exception_handlers


def test_get_application_registers_middlewares() -> None:
    app = get_application(cache_backend=InMemoryCacheBackend())

    middleware_classes = {middleware.cls for middleware in app.user_middleware}

    assert CORSMiddleware in middleware_classes
    assert SentryAsgiMiddleware in middleware_classes
    assert isinstance(app.openapi(), dict)


def test_get_application_shares_cache_backend() -> None:
    backend = InMemoryCacheBackend()

    app = get_application(cache_backend=backend)

    assert app.state.cache_backend is backend
    assert isinstance(app.state.token_verification_cache, TokenVerificationCache)


def test_get_application_namespaces_verification_cache_keys() -> None:
    app = get_application(cache_backend=InMemoryCacheBackend())

    verification_cache = app.state.token_verification_cache

    assert verification_cache.key_prefix == (
        f"{config.cache.CACHE_KEY_PREFIX}:session-verification"
    )
