"""Domain services for CollabPortal.

Services contain the business workflows: they validate input, drive the
repositories within one session transaction and fire the side channel
(notifications, chat, email) after the primary write commits.
"""

from collabportal.domain.services.token_issuer import (
    issue_invitation_token,
    issue_reset_token,
)
from collabportal.domain.services.admin_bootstrap import AdminBootstrapError, ensure_admin
from collabportal.domain.services.invitation_service import (
    BulkInviteResult,
    InvitationService,
    RedeemedUser,
    SignupResult,
)
from collabportal.domain.services.password_reset_service import PasswordResetService
from collabportal.domain.services.visibility_service import VisibilityService
from collabportal.domain.services.content_normalizer import ContentNormalizer
from collabportal.domain.services.notification_service import NotificationService
from collabportal.domain.services.chat_service import ChatService
from collabportal.domain.services.tag_service import TagService
from collabportal.domain.services.user_service import UserService
from collabportal.domain.services.proposal_service import ProposalService
from collabportal.domain.services.response_service import (
    AcceptTerms,
    ResponseService,
    ResponseView,
)

__all__ = [
    "AcceptTerms",
    "AdminBootstrapError",
    "BulkInviteResult",
    "ChatService",
    "ContentNormalizer",
    "InvitationService",
    "NotificationService",
    "PasswordResetService",
    "ProposalService",
    "RedeemedUser",
    "ResponseService",
    "ResponseView",
    "SignupResult",
    "TagService",
    "UserService",
    "VisibilityService",
    "ensure_admin",
    "issue_invitation_token",
    "issue_reset_token",
]
