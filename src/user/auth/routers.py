from typing import Annotated

from fastapi import APIRouter, Depends, Response

from src.core.schemas import MessageResponse
from src.user.auth.cookies import set_session_cookie
from src.user.auth.dependencies import get_bearer_token, get_session_state
from src.user.auth.schemas import (
    OtpVerificationResponse,
    SendOtpModel,
    SessionTokenResponse,
    TokenVerificationResult,
    VerifyOtpModel,
)
from src.user.auth.usecases.refresh_session import (
    RefreshSessionUseCase,
    get_refresh_session_use_case,
)
from src.user.auth.usecases.send_otp import SendOtpUseCase, get_send_otp_use_case
from src.user.auth.usecases.verify_otp import (
    VerifyOtpUseCase,
    get_verify_otp_use_case,
)

router = APIRouter()


@router.post("/otp/send", response_model=MessageResponse)
async def send_otp(
    data: SendOtpModel,
    use_case: Annotated[SendOtpUseCase, Depends(get_send_otp_use_case)],
) -> MessageResponse:
    """
    Emails a one-time passcode for login, signup or password reset.
    """
    return await use_case.execute(data=data)


@router.post(
    "/otp/verify",
    response_model=OtpVerificationResponse,
    response_model_exclude_none=True,
)
async def verify_otp(
    data: VerifyOtpModel,
    response: Response,
    use_case: Annotated[VerifyOtpUseCase, Depends(get_verify_otp_use_case)],
) -> OtpVerificationResponse:
    """
    Verifies a one-time passcode. Login and signup also open a session and set
    the session cookie.
    """
    result = await use_case.execute(data=data)
    if result.token:
        set_session_cookie(response, result.token)
    return result


@router.post("/refresh-token", response_model=SessionTokenResponse)
async def refresh_token(
    response: Response,
    token: Annotated[str, Depends(get_bearer_token)],
    use_case: Annotated[RefreshSessionUseCase, Depends(get_refresh_session_use_case)],
) -> SessionTokenResponse:
    """
    Re-issues the session token with a fresh activity timestamp.
    """
    result = await use_case.execute(token=token)
    set_session_cookie(response, result.token)
    return result


@router.get("/session", response_model=TokenVerificationResult)
async def get_session(
    session_state: Annotated[TokenVerificationResult, Depends(get_session_state)],
) -> TokenVerificationResult:
    """
    Reports whether the presented session token is still usable.
    """
    return session_state
