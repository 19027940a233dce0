from loggers import get_logger
from src.core.errors.exceptions import InstanceProcessingException
from src.user.auth.schemas import SessionTokenResponse
from src.user.auth.security import refresh_session_token

logger = get_logger(__name__)


class RefreshSessionUseCase:
    """Extend a live session by re-issuing its token with fresh clocks."""

    async def execute(self, token: str) -> SessionTokenResponse:
        new_token = refresh_session_token(token)
        if new_token is None:
            logger.debug("[RefreshSession] Refresh refused for an invalid token.")
            raise InstanceProcessingException("Unable to refresh token")
        return SessionTokenResponse(token=new_token)


def get_refresh_session_use_case() -> RefreshSessionUseCase:
    return RefreshSessionUseCase()
