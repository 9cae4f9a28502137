"""User profile entity types."""

from dataclasses import dataclass
from enum import Enum

DEFAULT_AVATAR_URL = "/default-avatar.svg"


class UserRole(str, Enum):
    """Role stored on the profile row."""

    ADMIN = "admin"
    USER = "user"


@dataclass(frozen=True)
class AuthUser:
    """Credential record as seen through an auth provider.

    Attributes:
        id: Identifier shared with the profile row.
        email: Login email address.
        email_confirmed: Whether the address has been confirmed.
        user_metadata: Free-form metadata (e.g. ``full_name``).
    """

    id: str
    email: str
    email_confirmed: bool
    user_metadata: dict
