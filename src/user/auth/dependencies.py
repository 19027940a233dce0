from fastapi import Depends, Request, Security
from fastapi.security.api_key import APIKeyHeader

from src.core.errors.exceptions import UnauthorizedException
from src.main.config import config
from src.user.auth.gateway import extract_session_token
from src.user.auth.schemas import TokenVerificationResult
from src.user.auth.verification_cache import (
    TokenVerificationCache,
    get_token_verification_cache,
)

session_token_header = APIKeyHeader(
    name="Authorization", scheme_name="session-token", auto_error=False
)


async def get_bearer_token(
    authorization: str | None = Security(session_token_header),
) -> str:
    """
    Extract the raw token from an ``Authorization: Bearer <token>`` header.

    Raises:
        UnauthorizedException: If the header is missing or uses another scheme
    """
    if not authorization:
        raise UnauthorizedException("Authentication token not found")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedException("Authorization header must use the Bearer scheme")
    return token.strip()


async def get_session_state(
    request: Request,
    verification_cache: TokenVerificationCache = Depends(
        get_token_verification_cache
    ),
) -> TokenVerificationResult:
    """
    Verification result for the token presented with the request, cookie first.
    Reuses the result stored by the session gateway when there is one.
    """
    gateway_result = getattr(request.state, "session", None)
    if isinstance(gateway_result, TokenVerificationResult):
        return gateway_result

    token = extract_session_token(request, config.cookie.AUTH_COOKIE_NAME)
    return await verification_cache.verify(token)


async def get_current_user_id(
    token: str = Depends(get_bearer_token),
    verification_cache: TokenVerificationCache = Depends(
        get_token_verification_cache
    ),
) -> str:
    """
    Resolve the user id of a valid bearer session token.

    Raises:
        UnauthorizedException: If the token is invalid, expired or idle too long
    """
    result = await verification_cache.verify(token)
    if not result.is_authenticated:
        raise UnauthorizedException(
            "Session expired due to inactivity"
            if result.is_expired_by_inactivity
            else "Invalid token"
        )
    return str(result.user_id)
