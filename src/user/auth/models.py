from datetime import datetime

from sqlalchemy import DateTime, Enum as SQLEnum, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database.base import Base
from src.core.database.mixins import TimestampMixin, UUIDIDMixin
from src.user.enums import OtpType


class OtpToken(Base, UUIDIDMixin, TimestampMixin):
    """
    One-time passcode sent by email. At most one row is kept per
    (email, type); a successful verification deletes it.
    """

    __tablename__ = "otp_tokens"
    __table_args__ = (Index("ix_otp_tokens_email_type", "email", "type"),)

    email: Mapped[str] = mapped_column(String(255))
    code: Mapped[str] = mapped_column(String(6))
    type: Mapped[OtpType] = mapped_column(
        SQLEnum(OtpType, name="otp_type"), nullable=False, default=OtpType.LOGIN
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)

    def __repr__(self) -> str:
        return f"<OtpToken(id={str(self.id)}, type={self.type!s})>"
