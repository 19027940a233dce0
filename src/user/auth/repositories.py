from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database.repositories import BaseRepository
from src.user.auth.models import OtpToken
from src.user.enums import OtpType


class OtpTokenRepository(BaseRepository[OtpToken]):

    model = OtpToken

    async def get_active(
        self,
        session: AsyncSession,
        email: str,
        code: str,
        otp_type: OtpType,
        now: datetime,
    ) -> OtpToken | None:
        """Find an unexpired code for the (email, type) pair."""
        query = (
            select(OtpToken)
            .where(
                OtpToken.email == email,
                OtpToken.code == code,
                OtpToken.type == otp_type,
                OtpToken.expires_at >= now,
            )
            .limit(1)
        )
        result = await session.execute(query)
        return result.scalars().first()

    async def delete_for_email(
        self, session: AsyncSession, email: str, otp_type: OtpType
    ) -> int:
        return await self.delete_where(
            session, OtpToken.email == email, OtpToken.type == otp_type
        )

    async def delete_expired(self, session: AsyncSession, now: datetime) -> int:
        return await self.delete_where(session, OtpToken.expires_at < now)
