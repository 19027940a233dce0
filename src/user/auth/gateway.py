from collections.abc import Awaitable, Callable
from enum import StrEnum

from fastapi import FastAPI, Request
from starlette.responses import RedirectResponse, Response

from loggers import get_logger
from src.user.auth.schemas import TokenVerificationResult
from src.user.auth.security import strip_bearer_prefix
from src.user.auth.verification_cache import TokenVerificationCache

logger = get_logger(__name__)

SIGNIN_PATH = "/auth/signin"
SESSION_EXPIRED_REDIRECT = f"{SIGNIN_PATH}?session_expired=true"
DASHBOARD_PATH = "/dashboard"

PUBLIC_ROUTES = frozenset({"/api/auth/refresh-token", "/api/auth/session"})


class RouteKind(StrEnum):
    ROOT = "root"
    AUTH_PAGE = "auth_page"
    DASHBOARD_PAGE = "dashboard_page"
    API_AUTH = "api_auth"
    UNMATCHED = "unmatched"


def _is_under(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(f"{prefix}/")


def classify_route(path: str) -> RouteKind:
    if path == "/":
        return RouteKind.ROOT
    if _is_under(path, "/api/auth"):
        return RouteKind.API_AUTH
    if _is_under(path, "/auth"):
        return RouteKind.AUTH_PAGE
    if _is_under(path, DASHBOARD_PATH):
        return RouteKind.DASHBOARD_PAGE
    return RouteKind.UNMATCHED


def extract_session_token(request: Request, cookie_name: str) -> str | None:
    """Cookie first, then an ``Authorization: Bearer`` header."""
    cookie_token = request.cookies.get(cookie_name)
    if cookie_token:
        return cookie_token

    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return strip_bearer_prefix(authorization)
    return None


def resolve_gateway_redirect(
    result: TokenVerificationResult, route_kind: RouteKind
) -> str | None:
    """
    Decide where a page request should go, or None to let it through.

    Rules are evaluated top to bottom and the first match wins.
    """
    is_authenticated = result.is_valid

    if result.is_expired_by_inactivity and route_kind is not RouteKind.AUTH_PAGE:
        return SESSION_EXPIRED_REDIRECT
    if is_authenticated and route_kind is RouteKind.AUTH_PAGE:
        return DASHBOARD_PATH
    if not is_authenticated and route_kind is RouteKind.DASHBOARD_PAGE:
        return SIGNIN_PATH
    if route_kind is RouteKind.ROOT:
        return DASHBOARD_PATH if is_authenticated else SIGNIN_PATH
    return None


def register_session_gateway(
    app: FastAPI, verification_cache: TokenVerificationCache, cookie_name: str
) -> None:
    """
    Registers the session gateway. It never raises on a bad token: every
    failure ends up as a redirect or a pass-through.
    """

    @app.middleware("http")
    async def session_gateway_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        path = request.url.path
        route_kind = classify_route(path)

        if route_kind is RouteKind.UNMATCHED or path in PUBLIC_ROUTES:
            return await call_next(request)

        token = extract_session_token(request, cookie_name)
        result = await verification_cache.verify(token)
        request.state.session = result

        if route_kind is RouteKind.API_AUTH:
            return await call_next(request)

        target = resolve_gateway_redirect(result, route_kind)
        if target is None:
            return await call_next(request)

        logger.debug("[SessionGateway] %s %s -> %s", request.method, path, target)
        return RedirectResponse(url=target, status_code=307)
