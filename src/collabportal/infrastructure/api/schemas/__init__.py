"""API Schemas for request/response validation."""

from collabportal.infrastructure.api.schemas.auth_schemas import (
    AuthResponse,
    DeleteUserRequest,
    LoginRequest,
    UpdateProfileRequest,
    UserResponse,
)
from collabportal.infrastructure.api.schemas.invitation_schemas import (
    BulkInviteRequest,
    CreateUserRequest,
    DeleteInvitationRequest,
    InvitationResponse,
    InviteUserRequest,
    PasswordResetRequest,
    ResetPasswordRequest,
    SignupWithInviteRequest,
    TokenCheckRequest,
)
from collabportal.infrastructure.api.schemas.proposal_schemas import (
    AcceptRequest,
    DeclineRequest,
    ProposalRequest,
    ProposalResponse,
    ResubmitRequest,
    SendEmailRequest,
)
from collabportal.infrastructure.api.schemas.response_schemas import (
    ChatMessageResponse,
    ChatResponse,
    NotificationResponse,
    PostMessageRequest,
    ResponseDetail,
    ResponseViewResponse,
    ReviewRequest,
)
from collabportal.infrastructure.api.schemas.tag_schemas import (
    TagCreateRequest,
    TagResponse,
    TagUpdateRequest,
    UserTagsRequest,
)

__all__ = [
    "AcceptRequest",
    "AuthResponse",
    "BulkInviteRequest",
    "ChatMessageResponse",
    "ChatResponse",
    "CreateUserRequest",
    "DeclineRequest",
    "DeleteUserRequest",
    "DeleteInvitationRequest",
    "InvitationResponse",
    "InviteUserRequest",
    "LoginRequest",
    "NotificationResponse",
    "PasswordResetRequest",
    "PostMessageRequest",
    "ProposalRequest",
    "ProposalResponse",
    "ResetPasswordRequest",
    "ResponseDetail",
    "ResponseViewResponse",
    "ResubmitRequest",
    "ReviewRequest",
    "SignupWithInviteRequest",
    "TagCreateRequest",
    "TagResponse",
    "TagUpdateRequest",
    "TokenCheckRequest",
    "UpdateProfileRequest",
    "UserResponse",
    "UserTagsRequest",
]
