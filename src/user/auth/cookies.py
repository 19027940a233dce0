from starlette.responses import Response

from src.main.config import config


def set_session_cookie(response: Response, token: str) -> None:
    """Attach the session token cookie, aligned with the token's absolute lifetime."""
    response.set_cookie(
        key=config.cookie.AUTH_COOKIE_NAME,
        value=token,
        max_age=config.jwt.session_token_max_age_seconds,
        path="/",
        secure=config.cookie.AUTH_COOKIE_SECURE,
        httponly=config.cookie.AUTH_COOKIE_HTTPONLY,
        samesite=config.cookie.AUTH_COOKIE_SAMESITE,
    )
