"""Password reset token repository."""

from datetime import datetime

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from collabportal.domain.entities.clock import utcnow
from collabportal.domain.entities.password_reset import ResetTokenStatus
from collabportal.infrastructure.persistence.models import PasswordResetTokenModel


class PasswordResetRepository:
    """Repository for password reset token operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, token: PasswordResetTokenModel) -> PasswordResetTokenModel:
        """Persist a new reset token."""
        self.session.add(token)
        await self.session.flush()
        return token

    async def get_pending_by_email(self, email: str) -> PasswordResetTokenModel | None:
        """Get the pending reset token for an email, if any."""
        result = await self.session.execute(
            select(PasswordResetTokenModel)
            .where(
                and_(
                    PasswordResetTokenModel.email == email,
                    PasswordResetTokenModel.status == ResetTokenStatus.PENDING.value,
                )
            )
            .order_by(PasswordResetTokenModel.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def find_pending(self, email: str, token: str) -> PasswordResetTokenModel | None:
        """Find a pending reset token matching an email and token value."""
        result = await self.session.execute(
            select(PasswordResetTokenModel)
            .where(
                and_(
                    PasswordResetTokenModel.email == email,
                    PasswordResetTokenModel.token == token,
                    PasswordResetTokenModel.status == ResetTokenStatus.PENDING.value,
                )
            )
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def reissue(
        self, reset_token: PasswordResetTokenModel, token: str, expires_at: datetime
    ) -> PasswordResetTokenModel:
        """Refresh a pending reset token in place."""
        reset_token.token = token
        reset_token.expires_at = expires_at
        reset_token.updated_at = utcnow()
        await self.session.flush()
        return reset_token

    async def set_status(self, reset_token: PasswordResetTokenModel, status: ResetTokenStatus) -> None:
        """Transition a token to a new status.

        Marking a token ``used`` also records ``used_at``.
        """
        now = utcnow()
        reset_token.status = status.value
        reset_token.updated_at = now
        if status == ResetTokenStatus.USED:
            reset_token.used_at = now
        await self.session.flush()
