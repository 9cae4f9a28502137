"""Bootstrap admin creation.

Used at startup (``COLLABPORTAL_ADMIN_EMAIL`` / ``COLLABPORTAL_ADMIN_PASSWORD``)
and by the ``create-admin`` CLI command.
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from collabportal.core.config import get_settings
from collabportal.domain.entities.user import UserRole
from collabportal.infrastructure.auth import AuthProviderError, LocalAuthProvider
from collabportal.infrastructure.persistence.repositories import UserRepository


class AdminBootstrapError(Exception):
    """Raised when the bootstrap admin cannot be created."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


async def ensure_admin(session: AsyncSession, email: str, password: str) -> bool:
    """Make sure an admin account exists for ``email``.

    An existing account keeps its password; only its profile role is raised
    to admin.

    Args:
        session: Database session.
        email: Admin email address.
        password: Password for a newly created account.

    Returns:
        True if a new account was created, False if one already existed.

    Raises:
        AdminBootstrapError: If the password is too short or persistence fails.
    """
    email = email.strip().lower()
    min_length = get_settings().min_password_length
    if len(password) < min_length:
        raise AdminBootstrapError(f"Password must be at least {min_length} characters long")

    auth_provider = LocalAuthProvider(session)
    user_repo = UserRepository(session)

    try:
        auth_user = await auth_provider.find_user_by_email(email)
        created = auth_user is None
        if created:
            auth_user = await auth_provider.create_user(
                email=email,
                password=password,
                email_confirm=True,
                user_metadata={"role": UserRole.ADMIN.value},
            )

        profile = await user_repo.upsert_profile(
            user_id=auth_user.id,
            email=email,
            role=UserRole.ADMIN,
        )
        if profile.role != UserRole.ADMIN.value:
            profile.role = UserRole.ADMIN.value
            await session.flush()

        await session.commit()
        return created
    except (AuthProviderError, SQLAlchemyError) as e:
        await session.rollback()
        raise AdminBootstrapError(f"Failed to create admin: {e}") from e
