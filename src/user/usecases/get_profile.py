from uuid import UUID

from fastapi import Depends

from loggers import get_logger
from src.core.cache.backend.interface import CacheBackend
from src.core.cache.coder.json_coder import JsonCoder
from src.core.cache.core import build_cache_key
from src.core.cache.dependencies import get_cache_backend
from src.core.database.session import get_unit_of_work
from src.core.database.uow import ApplicationUnitOfWork
from src.core.errors.exceptions import InstanceNotFoundException
from src.main.config import config
from src.user.schemas import UserDetailViewModel

logger = get_logger(__name__)


class GetUserProfileUseCase:
    """Load the profile of the session owner, cached per user for a short TTL."""

    def __init__(
        self,
        uow: ApplicationUnitOfWork,
        cache_backend: CacheBackend,
        ttl_seconds: int = config.cache.DATA_CACHE_TTL_SECONDS,
    ) -> None:
        self.uow = uow
        self.cache_backend = cache_backend
        self.ttl_seconds = ttl_seconds

    async def execute(self, user_id: str) -> UserDetailViewModel:
        cache_key = build_cache_key(config.cache, "user-profile", user_id)
        cached = await self.cache_backend.get_value(cache_key)
        if cached is not None:
            logger.debug("[GetUserProfile] Cache hit for user %s.", user_id)
            return UserDetailViewModel.model_validate(JsonCoder.decode(cached))

        try:
            user_uuid = UUID(user_id)
        except ValueError:
            raise InstanceNotFoundException("User not found")

        async with self.uow as uow:
            user = await uow.users.get_single(uow.session, id=user_uuid)

        if user is None:
            raise InstanceNotFoundException(
                "User not found", additional_info={"user_id": user_id}
            )

        profile = UserDetailViewModel.model_validate(user)
        await self.cache_backend.set_value(
            cache_key, JsonCoder.encode(profile.model_dump()), self.ttl_seconds
        )
        return profile


def get_user_profile_use_case(
    uow: ApplicationUnitOfWork = Depends(get_unit_of_work),
    cache_backend: CacheBackend = Depends(get_cache_backend),
) -> GetUserProfileUseCase:
    return GetUserProfileUseCase(uow=uow, cache_backend=cache_backend)
