"""Abstract base class for auth providers.

An auth provider owns login credentials. Profiles, roles and everything
else live in the application's own tables.
"""

from abc import ABC, abstractmethod

from collabportal.domain.entities.user import AuthUser


class AuthProviderError(Exception):
    """Raised when the auth provider fails an operation."""

    pass


class AuthUserExistsError(AuthProviderError):
    """Raised when creating a user whose email is already registered."""

    pass


class AuthProvider(ABC):
    """Interface every auth provider must implement."""

    @abstractmethod
    async def create_user(
        self,
        email: str,
        password: str,
        email_confirm: bool = False,
        user_metadata: dict | None = None,
    ) -> AuthUser:
        """Create a credential record.

        Raises:
            AuthUserExistsError: If the email is already registered.
            AuthProviderError: On any other failure.
        """
        ...

    @abstractmethod
    async def find_user_by_email(self, email: str) -> AuthUser | None:
        """Find a credential record by email."""
        ...

    @abstractmethod
    async def update_user(
        self,
        user_id: str,
        password: str | None = None,
        email_confirm: bool | None = None,
        user_metadata: dict | None = None,
    ) -> AuthUser:
        """Update a credential record.

        ``user_metadata`` is merged into the stored metadata.

        Raises:
            AuthProviderError: If the user does not exist or the update fails.
        """
        ...

    @abstractmethod
    async def authenticate(self, email: str, password: str) -> AuthUser | None:
        """Check credentials.

        Returns:
            The user on success, None on bad credentials.
        """
        ...
