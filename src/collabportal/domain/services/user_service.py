"""User account management: profile edits, password changes and deletion."""

import uuid
from pathlib import PurePosixPath

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from collabportal.core.config import Settings
from collabportal.core.logging import get_logger
from collabportal.domain.exceptions import NotFoundError, UpstreamError, ValidationError
from collabportal.infrastructure.auth import AuthProvider, AuthProviderError
from collabportal.infrastructure.persistence.models import UserModel
from collabportal.infrastructure.persistence.repositories import UserRepository
from collabportal.infrastructure.storage import StorageError, StorageProvider

logger = get_logger(__name__)

ALLOWED_AVATAR_TYPES = {"image/png", "image/jpeg", "image/gif", "image/webp"}


class UserService:
    """Service for a user's own account and for admin user deletion."""

    def __init__(
        self,
        session: AsyncSession,
        user_repo: UserRepository,
        auth_provider: AuthProvider,
        settings: Settings,
    ) -> None:
        self.session = session
        self.user_repo = user_repo
        self.auth_provider = auth_provider
        self.settings = settings

    async def get(self, user_id: str) -> UserModel:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def update_profile(
        self,
        user_id: str,
        full_name: str | None = None,
        phone_number: str | None = None,
        avatar_url: str | None = None,
    ) -> UserModel:
        """Update the editable profile fields.

        Fields left as None are not touched.

        Raises:
            ValidationError: If the full name is blank.
            NotFoundError: If the user does not exist.
        """
        user = await self.get(user_id)
        if full_name is not None:
            full_name = full_name.strip()
            if not full_name:
                raise ValidationError("Full name is required")
            user.full_name = full_name
        if phone_number is not None:
            user.phone_number = phone_number.strip() or None
        if avatar_url is not None:
            user.avatar_url = avatar_url

        try:
            await self.session.flush()
            if full_name is not None:
                await self.auth_provider.update_user(user.id, user_metadata={"full_name": full_name})
            await self.session.commit()
        except (AuthProviderError, SQLAlchemyError) as e:
            await self.session.rollback()
            raise UpstreamError(f"Failed to update profile: {e}") from e

        logger.info("Profile updated", user_id=user.id)
        return user

    async def change_password(self, user_id: str, current_password: str, new_password: str) -> None:
        """Change a password after checking the current one.

        Raises:
            ValidationError: If a field is missing, the new password is too
                short or the current password is wrong.
            UpstreamError: If the password could not be stored.
        """
        if not current_password or not new_password:
            raise ValidationError("Current and new password are required")
        min_length = self.settings.min_password_length
        if len(new_password) < min_length:
            raise ValidationError(f"Password must be at least {min_length} characters long")

        user = await self.get(user_id)
        if await self.auth_provider.authenticate(user.email, current_password) is None:
            raise ValidationError("Current password is incorrect")

        try:
            await self.auth_provider.update_user(user.id, password=new_password)
            await self.session.commit()
        except (AuthProviderError, SQLAlchemyError) as e:
            await self.session.rollback()
            raise UpstreamError(f"Failed to update password: {e}") from e

        logger.info("Password changed", user_id=user.id)

    async def upload_avatar(
        self, storage: StorageProvider, user_id: str, filename: str, content: bytes, content_type: str
    ) -> UserModel:
        """Store a new avatar image and point the profile at it."""
        if content_type not in ALLOWED_AVATAR_TYPES:
            raise ValidationError("Avatar must be a PNG, JPEG, GIF or WebP image")
        if not content:
            raise ValidationError("Avatar file is empty")
        if len(content) > self.settings.max_image_size:
            raise ValidationError(
                f"Avatar exceeds the maximum size of {self.settings.max_image_size} bytes"
            )

        await self.get(user_id)
        ext = PurePosixPath(filename or "").suffix.lower().lstrip(".") or content_type.split("/")[1]
        key = f"{user_id}-{uuid.uuid4().hex[:8]}.{ext}"
        try:
            stored = await storage.upload(self.settings.avatar_bucket, key, content, content_type)
        except StorageError as e:
            raise UpstreamError(f"Failed to upload avatar: {e}") from e

        return await self.update_profile(user_id, avatar_url=stored.url)

    async def delete_user(self, user_id: str, acting_user_id: str) -> None:
        """Delete a user and all of their data in one transaction.

        Raises:
            ValidationError: If the ID is missing or names the acting admin.
            NotFoundError: If the user does not exist.
            UpstreamError: If the deletion failed; nothing is removed.
        """
        user_id = (user_id or "").strip()
        if not user_id:
            raise ValidationError("User ID is required")
        if user_id == acting_user_id:
            raise ValidationError("You cannot delete your own account")

        user = await self.get(user_id)
        email = user.email
        try:
            await self.user_repo.delete_cascade(user)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("User deletion failed", user_id=user_id, error=str(e))
            raise UpstreamError(f"Failed to delete user: {e}") from e

        logger.info("User deleted", user_id=user_id, email=email, deleted_by=acting_user_id)
