from collections.abc import Callable
import time
from typing import Any, cast

from fastapi import Request

from loggers import get_logger
from src.core.cache.backend.interface import CacheBackend
from src.core.cache.coder.json_coder import JsonCoder
from src.user.auth.schemas import TokenVerificationResult
from src.user.auth.security import verify_session_token

logger = get_logger(__name__)

TokenVerifier = Callable[[str], TokenVerificationResult]


class TokenVerificationCache:
    """
    Short-lived memo of session token verifications, keyed by the raw token.

    Each entry stores {isValid, isExpiredByInactivity, userId, timestamp}. A hit
    younger than ``ttl_seconds`` is served without calling the verifier, so a
    token that crosses its inactivity limit may still be reported valid for up
    to one TTL. Expired entries are swept by the backend on every access.
    """

    def __init__(
        self,
        backend: CacheBackend,
        ttl_seconds: int = 60,
        verifier: TokenVerifier = verify_session_token,
        clock: Callable[[], float] = time.time,
        key_prefix: str = "session-verification",
    ) -> None:
        self.backend = backend
        self.ttl_seconds = ttl_seconds
        self._verifier = verifier
        self._clock = clock
        self.key_prefix = key_prefix

    def _key(self, token: str) -> str:
        return f"{self.key_prefix}:{token}"

    async def _get_fresh_entry(self, key: str, now: float) -> dict[str, Any] | None:
        try:
            cached = await self.backend.get_value(key)
        except Exception:
            logger.exception("Failed to read session verification from cache")
            return None
        if cached is None:
            return None
        entry: dict[str, Any] = JsonCoder.decode(cached)
        if now - float(entry.get("timestamp", 0)) >= self.ttl_seconds:
            return None
        return entry

    async def verify(self, token: str | None) -> TokenVerificationResult:
        if not token:
            return TokenVerificationResult(is_valid=False)

        key = self._key(token)
        now = self._clock()

        entry = await self._get_fresh_entry(key, now)
        if entry is not None:
            entry.pop("timestamp", None)
            return TokenVerificationResult.model_validate(entry)

        result = self._verifier(token)
        try:
            await self.backend.set_value(
                key,
                JsonCoder.encode(
                    {**result.model_dump(by_alias=True), "timestamp": now}
                ),
                self.ttl_seconds,
            )
        except Exception:
            logger.exception("Failed to store session verification in cache")
            return result
        logger.debug(
            "Session verification cached: valid=%s idle=%s",
            result.is_valid,
            result.is_expired_by_inactivity,
        )
        return result


def get_token_verification_cache(request: Request) -> TokenVerificationCache:
    verification_cache = getattr(request.app.state, "token_verification_cache", None)
    if verification_cache is None:
        raise RuntimeError(
            "Token verification cache is not initialized. "
            "Ensure get_application() built it."
        )
    return cast(TokenVerificationCache, verification_cache)
