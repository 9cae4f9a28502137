"""Domain entities for CollabPortal.

Entities are plain enums, dataclasses and pure functions. They have no
dependencies on infrastructure or external frameworks.
"""

from collabportal.domain.entities.invitation import (
    InvitationRejection,
    InvitationStatus,
    InvitationValidation,
    InviteResult,
)
from collabportal.domain.entities.notification import NotificationType
from collabportal.domain.entities.password_reset import ResetTokenStatus, ResetValidation
from collabportal.domain.entities.proposal import ProposalDraft
from collabportal.domain.entities.response import (
    AdminResponseStatus,
    PaymentMethod,
    ProgressStatus,
    ResponseStatus,
)
from collabportal.domain.entities.user import AuthUser, UserRole

__all__ = [
    "AdminResponseStatus",
    "AuthUser",
    "InvitationRejection",
    "InvitationStatus",
    "InvitationValidation",
    "InviteResult",
    "NotificationType",
    "PaymentMethod",
    "ProgressStatus",
    "ProposalDraft",
    "ResetTokenStatus",
    "ResetValidation",
    "ResponseStatus",
    "UserRole",
]
