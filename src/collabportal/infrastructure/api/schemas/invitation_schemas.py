"""Pydantic schemas for invitation, signup and password reset endpoints.

Request bodies accept the camelCase names the web client sends as well as
the snake_case field names.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class InviteUserRequest(BaseModel):
    """Request body for inviting a single user."""

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = Field(None, description="Email address to invite")
    handle_name: str | None = Field(None, alias="handleName", description="Social handle")
    tag_id: str | None = Field(None, alias="tagId", description="Tag assigned on signup")


class BulkInviteRequest(BaseModel):
    """Request body for inviting many users under one tag."""

    model_config = ConfigDict(populate_by_name=True)

    emails: list[str] = Field(default_factory=list, description="Email addresses to invite")
    tag_id: str | None = Field(None, alias="tagId", description="Tag for every invitee")


class CreateUserRequest(BaseModel):
    """Request body for completing registration from an invitation."""

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    password: str | None = None
    full_name: str | None = Field(None, alias="fullName")
    token: str | None = None
    phone_number: str | None = Field(None, alias="phoneNumber")


class DeleteInvitationRequest(BaseModel):
    """Request body for deleting an invitation."""

    model_config = ConfigDict(populate_by_name=True)

    invitation_id: str | None = Field(None, alias="invitationId")


class TokenCheckRequest(BaseModel):
    """Email and token pair submitted for validation."""

    email: str | None = None
    token: str | None = None


class SignupWithInviteRequest(BaseModel):
    """Request body for a tag-scoped self signup."""

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    password: str | None = None
    full_name: str | None = Field(None, alias="fullName")
    invite_token: str | None = Field(None, alias="inviteToken")
    tag_id: str | None = Field(None, alias="tagId")


class PasswordResetRequest(BaseModel):
    """Request body for asking for a reset link."""

    email: str | None = None


class ResetPasswordRequest(BaseModel):
    """Request body for setting a new password with a reset token."""

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    token: str | None = None
    new_password: str | None = Field(None, alias="newPassword")


class InvitationResponse(BaseModel):
    """Invitation details. The token is never listed."""

    id: str = Field(..., description="Invitation ID")
    email: str = Field(..., description="Email address of the invitee")
    handle_name: str | None = Field(None, description="Social handle")
    tag_id: str | None = Field(None, description="Tag assigned on signup")
    status: str = Field(..., description="pending or completed")
    expires_at: datetime = Field(..., description="Expiration timestamp")
    created_at: datetime = Field(..., description="Creation timestamp")

    model_config = ConfigDict(from_attributes=True)
