"""SQLAlchemy models for CollabPortal tables.

All models inherit from the Base class defined in database.py and are
created on application startup in development mode.
"""

from collabportal.infrastructure.persistence.models.auth_account import AuthAccountModel
from collabportal.infrastructure.persistence.models.chat import ChatMessageModel, ChatModel
from collabportal.infrastructure.persistence.models.invitation import InvitationModel
from collabportal.infrastructure.persistence.models.notification import NotificationModel
from collabportal.infrastructure.persistence.models.password_reset import PasswordResetTokenModel
from collabportal.infrastructure.persistence.models.proposal import (
    ProposalModel,
    ProposalVisibilityModel,
)
from collabportal.infrastructure.persistence.models.response import (
    AdminResponseModel,
    ResponseModel,
)
from collabportal.infrastructure.persistence.models.tag import TagModel, UserTagModel
from collabportal.infrastructure.persistence.models.user import UserModel

__all__ = [
    "AdminResponseModel",
    "AuthAccountModel",
    "ChatMessageModel",
    "ChatModel",
    "InvitationModel",
    "NotificationModel",
    "PasswordResetTokenModel",
    "ProposalModel",
    "ProposalVisibilityModel",
    "ResponseModel",
    "TagModel",
    "UserModel",
    "UserTagModel",
]
