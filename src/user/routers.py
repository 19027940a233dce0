from typing import Annotated

from fastapi import APIRouter, Depends

from src.user.auth.dependencies import get_current_user_id
from src.user.schemas import (
    UserDetailViewModel,
    UserExistsRequestModel,
    UserExistsResponse,
)
from src.user.usecases.check_exists import (
    CheckUserExistsUseCase,
    get_check_user_exists_use_case,
)
from src.user.usecases.get_profile import (
    GetUserProfileUseCase,
    get_user_profile_use_case,
)

router = APIRouter()


@router.get("/me", response_model=UserDetailViewModel)
async def get_user_profile(
    user_id: Annotated[str, Depends(get_current_user_id)],
    use_case: Annotated[GetUserProfileUseCase, Depends(get_user_profile_use_case)],
) -> UserDetailViewModel:
    """
    Returns the current user's information.
    """
    return await use_case.execute(user_id=user_id)


@router.post("/exists", response_model=UserExistsResponse)
async def check_user_exists(
    data: UserExistsRequestModel,
    use_case: Annotated[
        CheckUserExistsUseCase, Depends(get_check_user_exists_use_case)
    ],
) -> UserExistsResponse:
    """
    Tells whether an account is registered for the email.
    """
    return await use_case.execute(data=data)
