from src.core.cache.backend.interface import CacheBackend
from src.core.email_service.schemas import MailTemplateOtpBody
from src.core.email_service.service import EmailService
from src.core.errors.exceptions import InstanceProcessingException
from src.main.config import config


class OtpNotifier:
    """
    Coordinates sending one-time passcodes. Repeated sends are throttled
    through the optional cache backend and the passcode is emailed.
    The throttle window starts only once a code was delivered.
    """

    def __init__(
        self,
        email_service: EmailService,
        cache_backend: CacheBackend | None = None,
        throttle_ttl_sec: int = config.otp.OTP_RESEND_THROTTLE_SECONDS,
        template_name: str = "otp_code.html",
    ) -> None:
        self.email_service = email_service
        self.cache_backend = cache_backend
        self.throttle_ttl_sec = throttle_ttl_sec
        self.template_name = template_name

    def _throttle_backend(self) -> CacheBackend | None:
        if self.throttle_ttl_sec <= 0:
            return None
        return self.cache_backend

    async def ensure_not_throttled(self, key: str) -> None:
        backend = self._throttle_backend()
        if backend is None:
            return
        if await backend.get_value(key):
            raise InstanceProcessingException(
                "A verification code was sent recently. Please wait before retrying."
            )

    async def mark_sent(self, key: str) -> None:
        backend = self._throttle_backend()
        if backend is not None:
            await backend.set_value(key, b"1", self.throttle_ttl_sec)

    async def send_code(self, email: str, code: str) -> None:
        title = "Your verification code"
        await self.email_service.send_template_email(
            subject=f"{title} - {config.app.PROJECT_NAME}",
            recipients=email,
            template_name=self.template_name,
            template_body=MailTemplateOtpBody(
                title=title,
                code=code,
                expires_in_minutes=config.otp.OTP_EXPIRE_MINUTES,
                project_name=config.app.PROJECT_NAME,
            ),
        )
