from fastapi import Depends

from loggers import get_logger
from src.core.database.session import get_unit_of_work
from src.core.database.uow import ApplicationUnitOfWork
from src.core.errors.exceptions import (
    InstanceNotFoundException,
    InstanceProcessingException,
)
from src.core.utils.datetime_utils import get_utc_now
from src.core.utils.security import mask_email
from src.user.auth.gateway import DASHBOARD_PATH, SIGNIN_PATH
from src.user.auth.schemas import OtpVerificationResponse, VerifyOtpModel
from src.user.auth.security import create_session_token
from src.user.enums import OtpType
from src.user.models import User
from src.user.schemas import UserProfileViewModel

logger = get_logger(__name__)


class VerifyOtpUseCase:
    """
    Consume a one-time passcode and act on its purpose.

    SIGNUP creates the account, LOGIN refreshes the verification date. Both
    issue a session token. RESET_PASSWORD only confirms the code.
    """

    def __init__(self, uow: ApplicationUnitOfWork) -> None:
        self.uow = uow

    async def execute(self, data: VerifyOtpModel) -> OtpVerificationResponse:
        otp_type = OtpType(data.type)

        async with self.uow as uow:
            now = get_utc_now()
            await uow.otp_tokens.delete_expired(uow.session, now)

            otp = await uow.otp_tokens.get_active(
                uow.session,
                email=data.email,
                code=data.code,
                otp_type=otp_type,
                now=now,
            )
            if otp is None:
                logger.debug(
                    "[VerifyOtp] Invalid or expired %s code for '%s'.",
                    otp_type,
                    mask_email(data.email),
                )
                raise InstanceProcessingException("Invalid or expired code")
            await uow.otp_tokens.delete(uow.session, id=otp.id)

            if otp_type == OtpType.RESET_PASSWORD:
                await uow.commit()
                return OtpVerificationResponse(
                    success=True, message="Verification successful"
                )

            user = await uow.users.get_single(uow.session, email=data.email)
            if otp_type == OtpType.SIGNUP:
                user = await self._register(uow, user, data.email)
                message = "Registration successful"
            else:
                user = await self._login(uow, user, data.email)
                message = "Login successful"
            await uow.commit()

        token = create_session_token(user.id)
        logger.info(
            "[VerifyOtp] %s completed for '%s'.", otp_type, mask_email(data.email)
        )
        return OtpVerificationResponse(
            success=True,
            message=message,
            token=token,
            user=UserProfileViewModel.model_validate(user),
            redirect_to=DASHBOARD_PATH,
        )

    @staticmethod
    async def _register(
        uow: ApplicationUnitOfWork, existing: User | None, email: str
    ) -> User:
        if existing is not None:
            raise InstanceProcessingException(
                "This email is already registered",
                additional_info={"redirect_to": SIGNIN_PATH},
            )
        user = await uow.users.create(
            uow.session, {"email": email, "email_verified_at": get_utc_now()}
        )
        await uow.flush()
        return user

    @staticmethod
    async def _login(
        uow: ApplicationUnitOfWork, user: User | None, email: str
    ) -> User:
        if user is None:
            raise InstanceNotFoundException(
                "User not found",
                additional_info={"redirect_to": "/auth/signup"},
            )
        updated = await uow.users.update(
            uow.session, {"email_verified_at": get_utc_now()}, id=user.id
        )
        return updated or user


def get_verify_otp_use_case(
    uow: ApplicationUnitOfWork = Depends(get_unit_of_work),
) -> VerifyOtpUseCase:
    return VerifyOtpUseCase(uow=uow)
