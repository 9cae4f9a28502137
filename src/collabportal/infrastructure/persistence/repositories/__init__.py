"""Repositories for database access."""

from collabportal.infrastructure.persistence.repositories.auth_account_repository import (
    AuthAccountRepository,
)
from collabportal.infrastructure.persistence.repositories.chat_repository import ChatRepository
from collabportal.infrastructure.persistence.repositories.invitation_repository import (
    InvitationRepository,
)
from collabportal.infrastructure.persistence.repositories.notification_repository import (
    NotificationRepository,
)
from collabportal.infrastructure.persistence.repositories.password_reset_repository import (
    PasswordResetRepository,
)
from collabportal.infrastructure.persistence.repositories.proposal_repository import (
    ProposalRepository,
    VisibilityRepository,
)
from collabportal.infrastructure.persistence.repositories.response_repository import (
    ResponseRepository,
)
from collabportal.infrastructure.persistence.repositories.tag_repository import TagRepository
from collabportal.infrastructure.persistence.repositories.user_repository import UserRepository

__all__ = [
    "AuthAccountRepository",
    "ChatRepository",
    "InvitationRepository",
    "NotificationRepository",
    "PasswordResetRepository",
    "ProposalRepository",
    "ResponseRepository",
    "TagRepository",
    "UserRepository",
    "VisibilityRepository",
]
