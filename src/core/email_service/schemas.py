from src.core.schemas import Base


class MailTemplateOtpBody(Base):
    title: str
    code: str
    expires_in_minutes: int
    project_name: str
