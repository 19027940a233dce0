from datetime import datetime, timedelta
from typing import Any, cast
from uuid import UUID

import jwt

from loggers import get_logger
from src.core.utils.datetime_utils import get_utc_now
from src.main.config import config
from src.user.auth.schemas import TokenVerificationResult
from src.user.auth.session_payload import SessionTokenPayload

logger = get_logger(__name__)

BEARER_PREFIX = "bearer "


def strip_bearer_prefix(token: str) -> str:
    if token[: len(BEARER_PREFIX)].lower() == BEARER_PREFIX:
        return token[len(BEARER_PREFIX) :].strip()
    return token.strip()


def create_session_token(user_id: str | UUID, now: datetime | None = None) -> str:
    """
    Create a new session token for ``user_id``.

    Both clocks start at ``now``: the absolute expiry is SESSION_TOKEN_EXPIRE_DAYS
    ahead and ``lastActivity`` marks the start of the inactivity window.

    Args:
        user_id: Identifier stored in the ``sub`` claim
        now: Issue time, defaults to the current UTC time

    Returns:
        str: Encoded HS256 JWT
    """
    issued_at = now or get_utc_now()
    expire = issued_at + timedelta(days=config.jwt.SESSION_TOKEN_EXPIRE_DAYS)
    timestamp = int(issued_at.timestamp())

    payload: SessionTokenPayload = {
        "sub": str(user_id),
        "iat": timestamp,
        "exp": int(expire.timestamp()),
        "lastActivity": timestamp,
    }

    encoded_jwt = jwt.encode(
        cast(dict[str, Any], payload),
        config.jwt.JWT_SECRET_KEY,
        config.jwt.ALGORITHM,
    )
    return str(encoded_jwt)


def decode_session_token(token: str) -> SessionTokenPayload:
    """
    Decode a session token, checking signature, algorithm and absolute expiry.

    Raises:
        jwt.PyJWTError: If any of these checks fails
    """
    payload = jwt.decode(
        strip_bearer_prefix(token),
        config.jwt.JWT_SECRET_KEY,
        algorithms=[config.jwt.ALGORITHM],
        options={"require": ["exp", "sub"]},
    )
    return cast(SessionTokenPayload, payload)


def is_expired_by_inactivity(
    payload: SessionTokenPayload, now: datetime | None = None
) -> bool:
    """
    A token without ``lastActivity`` is never considered idle; only the
    absolute expiry applies to it.
    """
    last_activity = payload.get("lastActivity")
    if last_activity is None:
        return False
    current_time = int((now or get_utc_now()).timestamp())
    idle_seconds = current_time - int(last_activity)
    return idle_seconds > config.jwt.SESSION_INACTIVITY_TIMEOUT_SECONDS


def verify_session_token(
    token: str, now: datetime | None = None
) -> TokenVerificationResult:
    """
    Verify a session token against both of its lifetimes.

    Bad signature, malformed input and absolute expiry all yield the same plain
    invalid result. Only the inactivity path sets ``is_expired_by_inactivity``,
    which lets callers show a "session expired" message instead of a bare login.
    """
    try:
        payload = decode_session_token(token)
    except jwt.ExpiredSignatureError:
        logger.debug("Session token rejected: absolute expiry reached")
        return TokenVerificationResult(is_valid=False)
    except jwt.PyJWTError as exc:
        logger.debug("Session token rejected: %s", type(exc).__name__)
        return TokenVerificationResult(is_valid=False)

    try:
        idle = is_expired_by_inactivity(payload, now=now)
    except (TypeError, ValueError):
        logger.debug("Session token rejected: malformed lastActivity claim")
        return TokenVerificationResult(is_valid=False)

    if idle:
        logger.debug("Session token rejected: inactivity window exceeded")
        return TokenVerificationResult(is_valid=False, is_expired_by_inactivity=True)

    return TokenVerificationResult(is_valid=True, user_id=payload["sub"])


def refresh_session_token(token: str, now: datetime | None = None) -> str | None:
    """
    Re-issue a session token with both clocks reset.

    The presented token must still pass full verification, including the
    inactivity window. Returns None otherwise.
    """
    result = verify_session_token(token, now=now)
    if not result.is_valid or result.user_id is None:
        return None
    return create_session_token(result.user_id, now=now)
