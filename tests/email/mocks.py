from typing import Any

from pydantic import BaseModel

from src.core.email_service.interfaces import AbstractMailer


class MockMailer(AbstractMailer):
    def __init__(self, fail_with: Exception | None = None):
        self.sent_template_emails: list[dict[str, Any]] = []
        self._fail_with = fail_with

    async def send_template(
        self,
        subject: str,
        recipients: list[str],
        template_name: str,
        template_data: BaseModel | dict[str, Any],
        subtype: str = "html",
    ) -> None:
        if self._fail_with is not None:
            raise self._fail_with
        self.sent_template_emails.append(
            {
                "subject": subject,
                "recipients": recipients,
                "template_name": template_name,
                "template_data": (
                    template_data
                    if isinstance(template_data, dict)
                    else template_data.model_dump()
                ),
                "subtype": subtype,
            }
        )

    @property
    def last_code(self) -> str | None:
        if not self.sent_template_emails:
            return None
        return self.sent_template_emails[-1]["template_data"].get("code")
