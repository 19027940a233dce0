from datetime import datetime
from uuid import UUID

from pydantic import EmailStr

from src.core.schemas import Base, EmailNormalizationMixin


class UserProfileViewModel(Base):
    id: UUID
    email: EmailStr
    name: str | None = None
    avatar: str | None = None


class UserDetailViewModel(UserProfileViewModel):
    created_at: datetime


class UserExistsRequestModel(EmailNormalizationMixin, Base):
    email: EmailStr


class UserExistsResponse(Base):
    exists: bool
