from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

import jwt
import pytest

from src.core.utils.datetime_utils import get_utc_now
from src.main.config import config
from src.user.auth.security import (
    create_session_token,
    decode_session_token,
    is_expired_by_inactivity,
    refresh_session_token,
    strip_bearer_prefix,
    verify_session_token,
)
from tests.factories.token_factory import (
    build_expired_session_token,
    build_idle_session_token,
    build_session_payload,
    build_session_token,
    encode_session_payload,
)

INACTIVITY = timedelta(seconds=config.jwt.SESSION_INACTIVITY_TIMEOUT_SECONDS)


def _decode(token: str) -> dict[str, object]:
    return jwt.decode(
        token, config.jwt.JWT_SECRET_KEY, algorithms=[config.jwt.ALGORITHM]
    )


def test_create_session_token_sets_both_clocks() -> None:
    issued_at = get_utc_now().replace(microsecond=0)
    user_id = uuid4()

    token = create_session_token(user_id, now=issued_at)
    payload = _decode(token)

    assert payload["sub"] == str(user_id)
    assert payload["iat"] == int(issued_at.timestamp())
    assert payload["lastActivity"] == payload["iat"]
    assert payload["exp"] == int((issued_at + timedelta(days=7)).timestamp())


def test_create_session_token_uses_hs256() -> None:
    token = create_session_token("user-1")

    assert jwt.get_unverified_header(token)["alg"] == "HS256"


def test_verify_fresh_token_is_valid() -> None:
    token = create_session_token("user-1")

    result = verify_session_token(token)

    assert result.is_valid is True
    assert result.user_id == "user-1"
    assert result.is_expired_by_inactivity is False


def test_verify_accepts_bearer_prefixed_token() -> None:
    token = create_session_token("user-1")

    result = verify_session_token(f"Bearer {token}")

    assert result.is_authenticated is True


def test_verify_token_idle_just_under_the_limit_is_valid() -> None:
    now = get_utc_now()
    token = build_idle_session_token("user-1", INACTIVITY - timedelta(hours=1))

    result = verify_session_token(token, now=now)

    assert result.is_valid is True


def test_verify_token_idle_at_exact_limit_is_still_valid() -> None:
    issued_at = get_utc_now() - INACTIVITY
    token = create_session_token("user-1", now=issued_at)

    result = verify_session_token(token, now=issued_at + INACTIVITY)

    assert result.is_valid is True


def test_verify_token_idle_past_the_limit_is_flagged() -> None:
    token = build_idle_session_token("user-1", INACTIVITY + timedelta(seconds=1))

    result = verify_session_token(token)

    assert result.is_valid is False
    assert result.is_expired_by_inactivity is True
    assert result.user_id is None


def test_verify_absolutely_expired_token_is_plain_invalid() -> None:
    token = build_expired_session_token("user-1")

    result = verify_session_token(token)

    assert result.is_valid is False
    assert result.is_expired_by_inactivity is False


def test_verify_token_expired_both_ways_reports_absolute_expiry() -> None:
    now = get_utc_now()
    token = build_session_token(
        "user-1",
        issued_at=now - timedelta(days=8),
        last_activity=now - timedelta(days=3),
        expires_at=now - timedelta(days=1),
    )

    result = verify_session_token(token)

    assert result.is_valid is False
    assert result.is_expired_by_inactivity is False


def test_verify_token_with_wrong_signature_is_invalid() -> None:
    payload = build_session_payload("user-1")
    token = encode_session_payload(payload, secret="another-signing-key")

    result = verify_session_token(token)

    assert result.is_valid is False
    assert result.is_expired_by_inactivity is False


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c", "Bearer "])
def test_verify_malformed_token_is_invalid(token: str) -> None:
    result = verify_session_token(token)

    assert result.is_valid is False
    assert result.is_expired_by_inactivity is False


def test_verify_token_without_last_activity_is_valid() -> None:
    token = build_session_token("user-1", include_last_activity=False)

    result = verify_session_token(token)

    assert result.is_valid is True
    assert result.user_id == "user-1"


def test_verify_token_with_malformed_last_activity_is_invalid() -> None:
    payload = build_session_payload("user-1")
    payload["lastActivity"] = "yesterday"

    result = verify_session_token(encode_session_payload(payload))

    assert result.is_valid is False
    assert result.is_expired_by_inactivity is False


def test_verify_token_without_subject_is_invalid() -> None:
    payload = build_session_payload("user-1")
    payload.pop("sub")

    result = verify_session_token(encode_session_payload(payload))

    assert result.is_valid is False


def test_is_expired_by_inactivity_ignores_missing_claim() -> None:
    payload = build_session_payload("user-1", include_last_activity=False)

    assert is_expired_by_inactivity(payload) is False  # type: ignore[arg-type]


def test_decode_session_token_raises_for_bad_signature() -> None:
    token = encode_session_payload(
        build_session_payload("user-1"), secret="another-signing-key"
    )

    with pytest.raises(jwt.InvalidSignatureError):
        decode_session_token(token)


def test_strip_bearer_prefix_is_case_insensitive() -> None:
    assert strip_bearer_prefix("bearer abc") == "abc"
    assert strip_bearer_prefix("BEARER  abc ") == "abc"
    assert strip_bearer_prefix("abc") == "abc"


def test_refresh_resets_last_activity_and_expiry() -> None:
    issued_at = get_utc_now() - timedelta(hours=5)
    token = create_session_token("user-1", now=issued_at)
    refreshed_at = get_utc_now().replace(microsecond=0)

    new_token = refresh_session_token(token, now=refreshed_at)

    assert new_token is not None
    payload = _decode(new_token)
    assert payload["sub"] == "user-1"
    assert payload["lastActivity"] == int(refreshed_at.timestamp())
    assert payload["exp"] == int((refreshed_at + timedelta(days=7)).timestamp())


def test_refresh_returns_none_for_idle_token() -> None:
    token = build_idle_session_token("user-1", INACTIVITY + timedelta(minutes=1))

    assert refresh_session_token(token) is None


def test_refresh_returns_none_for_expired_token() -> None:
    assert refresh_session_token(build_expired_session_token("user-1")) is None


def test_refresh_returns_none_for_garbage() -> None:
    assert refresh_session_token("not-a-token") is None


def test_verification_result_serializes_with_camel_case_keys() -> None:
    result = verify_session_token(create_session_token("user-1"))

    assert result.model_dump(by_alias=True) == {
        "isValid": True,
        "userId": "user-1",
        "isExpiredByInactivity": False,
    }
