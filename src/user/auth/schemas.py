from pydantic import ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from src.core.schemas import Base, EmailNormalizationMixin
from src.user.enums import OtpType
from src.user.schemas import UserProfileViewModel

OTP_CODE_PATTERN = r"^\d{6}$"


class SendOtpModel(EmailNormalizationMixin, Base):
    email: EmailStr
    type: OtpType = OtpType.LOGIN


class VerifyOtpModel(EmailNormalizationMixin, Base):
    email: EmailStr
    code: str = Field(pattern=OTP_CODE_PATTERN)
    type: OtpType = OtpType.LOGIN


class OtpVerificationResponse(Base):
    success: bool = True
    message: str | None = None
    token: str | None = None
    user: UserProfileViewModel | None = None
    redirect_to: str | None = None


class SessionTokenResponse(Base):
    token: str


class TokenVerificationResult(Base):
    """
    Outcome of verifying a session token.

    Serialized with camelCase keys: isValid, userId, isExpiredByInactivity.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    is_valid: bool
    user_id: str | None = None
    is_expired_by_inactivity: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.is_valid and self.user_id is not None
