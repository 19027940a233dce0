from fastapi import Depends

from src.core.database.session import get_unit_of_work
from src.core.database.uow import ApplicationUnitOfWork
from src.user.schemas import UserExistsRequestModel, UserExistsResponse


class CheckUserExistsUseCase:
    def __init__(self, uow: ApplicationUnitOfWork) -> None:
        self.uow = uow

    async def execute(self, data: UserExistsRequestModel) -> UserExistsResponse:
        async with self.uow as uow:
            exists = await uow.users.exists(uow.session, email=data.email)
        return UserExistsResponse(exists=exists)


def get_check_user_exists_use_case(
    uow: ApplicationUnitOfWork = Depends(get_unit_of_work),
) -> CheckUserExistsUseCase:
    return CheckUserExistsUseCase(uow=uow)
