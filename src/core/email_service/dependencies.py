from functools import lru_cache

from src.core.email_service.config import get_fastapi_mail_config
from src.core.email_service.fastapi_mailer import FastAPIMailer
from src.core.email_service.service import EmailService


@lru_cache
def get_email_service() -> EmailService:
    mailer = FastAPIMailer(get_fastapi_mail_config())
    return EmailService(mailer)
