from datetime import timedelta

from fastapi import Depends

from loggers import get_logger
from src.core.cache.backend.interface import CacheBackend
from src.core.cache.core import build_cache_key
from src.core.cache.dependencies import get_cache_backend
from src.core.database.session import get_unit_of_work
from src.core.database.uow import ApplicationUnitOfWork
from src.core.email_service.dependencies import get_email_service
from src.core.email_service.service import EmailService
from src.core.errors.exceptions import InstanceProcessingException
from src.core.schemas import MessageResponse
from src.core.utils.datetime_utils import get_utc_now
from src.core.utils.security import build_email_throttle_key, generate_otp, mask_email
from src.main.config import config
from src.user.auth.schemas import SendOtpModel
from src.user.auth.services.otp_notifier import OtpNotifier
from src.user.enums import OtpType

logger = get_logger(__name__)


class SendOtpUseCase:
    """Issue a fresh one-time passcode and email it."""

    def __init__(
        self,
        uow: ApplicationUnitOfWork,
        email_service: EmailService,
        cache_backend: CacheBackend | None = None,
    ) -> None:
        self.uow = uow
        self.email_service = email_service
        self.cache_backend = cache_backend

    async def execute(self, data: SendOtpModel) -> MessageResponse:
        notifier = OtpNotifier(
            email_service=self.email_service, cache_backend=self.cache_backend
        )

        async with self.uow as uow:
            user_exists = await uow.users.exists(uow.session, email=data.email)
            if data.type == OtpType.LOGIN and not user_exists:
                logger.debug(
                    "[SendOtp] Login code requested for unknown email '%s'.",
                    mask_email(data.email),
                )
                raise InstanceProcessingException(
                    "No account found with this email",
                    additional_info={"redirect_to": "/auth/signup"},
                )
            if data.type == OtpType.SIGNUP and user_exists:
                logger.debug(
                    "[SendOtp] Signup code requested for registered email '%s'.",
                    mask_email(data.email),
                )
                raise InstanceProcessingException(
                    "This email is already in use",
                    additional_info={"redirect_to": "/auth/signin"},
                )

            throttle_key = build_email_throttle_key(
                build_cache_key(config.cache, "otp", data.type), data.email
            )
            await notifier.ensure_not_throttled(throttle_key)

            now = get_utc_now()
            expired = await uow.otp_tokens.delete_expired(uow.session, now)
            if expired:
                logger.debug("[SendOtp] Removed %s expired codes.", expired)
            await uow.otp_tokens.delete_for_email(
                uow.session, data.email, OtpType(data.type)
            )

            code = generate_otp(config.otp.OTP_LENGTH)
            await uow.otp_tokens.create(
                uow.session,
                {
                    "email": data.email,
                    "code": code,
                    "type": OtpType(data.type),
                    "expires_at": now
                    + timedelta(minutes=config.otp.OTP_EXPIRE_MINUTES),
                },
            )
            await uow.commit()

        await notifier.send_code(data.email, code)
        await notifier.mark_sent(throttle_key)
        logger.info(
            "[SendOtp] %s code sent to '%s'.", data.type, mask_email(data.email)
        )
        return MessageResponse(success=True, message="Verification code sent")


def get_send_otp_use_case(
    uow: ApplicationUnitOfWork = Depends(get_unit_of_work),
    email_service: EmailService = Depends(get_email_service),
    cache_backend: CacheBackend = Depends(get_cache_backend),
) -> SendOtpUseCase:
    return SendOtpUseCase(
        uow=uow, email_service=email_service, cache_backend=cache_backend
    )
