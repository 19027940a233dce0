from typing import Any

from fastapi_mail import MessageType
from pydantic import BaseModel, EmailStr, TypeAdapter, ValidationError

from loggers import get_logger
from src.core.email_service.interfaces import AbstractMailer
from src.core.utils.security import mask_email

logger = get_logger(__name__)


class EmailService:
    _email_adapter = TypeAdapter(EmailStr)

    def __init__(self, mailer: AbstractMailer):
        self._mailer = mailer

    async def send_template_email(
        self,
        subject: str,
        recipients: str | list[str],
        template_name: str,
        template_body: BaseModel | dict[str, Any],
        subtype: MessageType = MessageType.html,
    ) -> None:
        normalized = self._normalize_and_validate_recipients(recipients)
        masked = [mask_email(e) for e in normalized]
        try:
            await self._mailer.send_template(
                subject,
                [str(e) for e in normalized],
                template_name,
                template_body,
                subtype.value,
            )
            logger.debug("Email '%s' sent to %s", template_name, masked)
        except Exception as e:
            logger.error("Failed to send template email to %s: %s", masked, e)
            raise

    def _normalize_and_validate_recipients(
        self, recipients: str | list[str]
    ) -> list[EmailStr]:
        """
        Normalize and validate email recipients.

        Converts input (string or list) into a validated list of EmailStr.
        Invalid addresses are skipped with a warning. Raises if none are valid.
        """
        if isinstance(recipients, str):
            recipients = [recipients]

        validated = []
        for email in recipients:
            try:
                validated.append(self._email_adapter.validate_python(email))
            except ValidationError:
                logger.warning("Invalid email address skipped: %s", mask_email(email))

        if not validated:
            raise ValueError("No valid recipient emails provided.")

        return validated
