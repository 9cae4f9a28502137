"""Database-backed auth provider.

Stores argon2 password hashes in ``auth_accounts`` through the request's
session, so credential changes commit together with the rest of the work.
"""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from collabportal.core.logging import get_logger
from collabportal.domain.entities.clock import utcnow
from collabportal.domain.entities.user import AuthUser
from collabportal.infrastructure.auth.auth_provider import (
    AuthProvider,
    AuthProviderError,
    AuthUserExistsError,
)
from collabportal.infrastructure.auth.password_hasher import hash_password, verify_password
from collabportal.infrastructure.persistence.models import AuthAccountModel
from collabportal.infrastructure.persistence.repositories import AuthAccountRepository

logger = get_logger(__name__)


def _to_auth_user(account: AuthAccountModel) -> AuthUser:
    return AuthUser(
        id=account.id,
        email=account.email,
        email_confirmed=account.email_confirmed,
        user_metadata=dict(account.user_metadata or {}),
    )


class LocalAuthProvider(AuthProvider):
    """Auth provider backed by the application database."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the provider.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session
        self.repo = AuthAccountRepository(session)

    async def create_user(
        self,
        email: str,
        password: str,
        email_confirm: bool = False,
        user_metadata: dict | None = None,
    ) -> AuthUser:
        if await self.repo.get_by_email(email) is not None:
            raise AuthUserExistsError(f"A user with email {email} has already been registered")

        account = AuthAccountModel(
            id=str(uuid.uuid4()),
            email=email,
            password_hash=hash_password(password),
            email_confirmed=email_confirm,
            user_metadata=dict(user_metadata or {}),
        )
        await self.repo.create(account)
        logger.info("Auth user created", user_id=account.id, email=email)
        return _to_auth_user(account)

    async def find_user_by_email(self, email: str) -> AuthUser | None:
        account = await self.repo.get_by_email(email)
        return _to_auth_user(account) if account else None

    async def update_user(
        self,
        user_id: str,
        password: str | None = None,
        email_confirm: bool | None = None,
        user_metadata: dict | None = None,
    ) -> AuthUser:
        account = await self.repo.get_by_id(user_id)
        if account is None:
            raise AuthProviderError(f"Auth user {user_id} not found")

        if password is not None:
            account.password_hash = hash_password(password)
        if email_confirm is not None:
            account.email_confirmed = email_confirm
        if user_metadata:
            # Reassign so the JSON column registers the change
            account.user_metadata = {**(account.user_metadata or {}), **user_metadata}
        account.updated_at = utcnow()
        await self.repo.update(account)
        return _to_auth_user(account)

    async def authenticate(self, email: str, password: str) -> AuthUser | None:
        account = await self.repo.get_by_email(email)
        if account is None or not verify_password(password, account.password_hash):
            return None
        account.last_sign_in_at = utcnow()
        await self.repo.update(account)
        return _to_auth_user(account)
