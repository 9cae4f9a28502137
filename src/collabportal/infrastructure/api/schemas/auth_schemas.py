"""Pydantic schemas for authentication endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class LoginRequest(BaseModel):
    """Request body for password login."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, description="User's password")


class UserResponse(BaseModel):
    """User profile information."""

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="User's email address")
    full_name: str | None = Field(None, description="Display name")
    phone_number: str | None = Field(None, description="Contact number")
    role: str = Field(..., description="Role, admin or user")
    avatar_url: str | None = Field(None, description="Avatar image URL")
    created_at: datetime = Field(..., description="When the profile was created")

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    """Response for successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field("bearer", description="Token type")
    expires_in: int = Field(..., description="Access token expiration time in seconds")
    user: UserResponse = Field(..., description="User information")


class UpdateProfileRequest(BaseModel):
    """Request body for editing the signed-in user's profile.

    Omitted fields are left unchanged. Supplying ``newPassword`` changes the
    password and requires ``currentPassword``.
    """

    model_config = ConfigDict(populate_by_name=True)

    full_name: str | None = Field(None, alias="fullName")
    phone_number: str | None = Field(None, alias="phoneNumber")
    current_password: str | None = Field(None, alias="currentPassword")
    new_password: str | None = Field(None, alias="newPassword")


class DeleteUserRequest(BaseModel):
    """Request body for deleting a user."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(None, alias="userId")
