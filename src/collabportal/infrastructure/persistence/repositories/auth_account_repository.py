"""Auth account repository."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from collabportal.infrastructure.persistence.models import AuthAccountModel


class AuthAccountRepository:
    """Repository for credential records."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, account: AuthAccountModel) -> AuthAccountModel:
        """Persist a new auth account."""
        self.session.add(account)
        await self.session.flush()
        return account

    async def get_by_id(self, account_id: str) -> AuthAccountModel | None:
        """Get an auth account by ID."""
        result = await self.session.execute(
            select(AuthAccountModel).where(AuthAccountModel.id == account_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> AuthAccountModel | None:
        """Get an auth account by email, case-insensitively."""
        result = await self.session.execute(
            select(AuthAccountModel).where(func.lower(AuthAccountModel.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def update(self, account: AuthAccountModel) -> AuthAccountModel:
        """Flush pending changes to an auth account."""
        await self.session.flush()
        return account
