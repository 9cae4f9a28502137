"""Tag management and user-tag assignment."""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from collabportal.core.logging import get_logger
from collabportal.domain.exceptions import ConflictError, NotFoundError, ValidationError
from collabportal.infrastructure.persistence.models import TagModel, UserModel
from collabportal.infrastructure.persistence.models.tag import DEFAULT_TAG_COLOR
from collabportal.infrastructure.persistence.repositories import TagRepository, UserRepository

logger = get_logger(__name__)


class TagService:
    """Service for tags and the users that carry them."""

    def __init__(self, session: AsyncSession, tag_repo: TagRepository, user_repo: UserRepository) -> None:
        self.session = session
        self.tag_repo = tag_repo
        self.user_repo = user_repo

    async def list_tags(self) -> list[TagModel]:
        """List all tags ordered by name."""
        return await self.tag_repo.list_all()

    async def create(self, name: str, color: str | None = None) -> TagModel:
        """Create a tag.

        Args:
            name: Tag name, unique case-insensitively.
            color: Display color, defaults to ``#FFB900``.

        Returns:
            The created tag.

        Raises:
            ValidationError: If the name is empty.
            ConflictError: If a tag with that name exists.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Tag name is required")
        if await self.tag_repo.get_by_name(name) is not None:
            raise ConflictError(f"Tag '{name}' already exists")

        tag = await self.tag_repo.create(
            TagModel(id=str(uuid.uuid4()), name=name, color=color or DEFAULT_TAG_COLOR)
        )
        await self.session.commit()
        logger.info("Tag created", tag_id=tag.id, name=name)
        return tag

    async def update(self, tag_id: str, name: str | None = None, color: str | None = None) -> TagModel:
        """Rename or recolor a tag."""
        tag = await self.tag_repo.get_by_id(tag_id)
        if tag is None:
            raise NotFoundError("Tag not found")

        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Tag name is required")
            existing = await self.tag_repo.get_by_name(name)
            if existing is not None and existing.id != tag.id:
                raise ConflictError(f"Tag '{name}' already exists")
            tag.name = name
        if color:
            tag.color = color

        await self.tag_repo.update(tag)
        await self.session.commit()
        return tag

    async def delete(self, tag_id: str) -> None:
        """Delete a tag and remove it from every user."""
        if not await self.tag_repo.delete(tag_id):
            raise NotFoundError("Tag not found")
        await self.session.commit()
        logger.info("Tag deleted", tag_id=tag_id)

    async def set_user_tags(self, user_id: str, tag_ids: list[str]) -> list[TagModel]:
        """Replace the tags a user carries.

        Raises:
            NotFoundError: If the user does not exist.
            ValidationError: If any tag does not exist.
        """
        if await self.user_repo.get_by_id(user_id) is None:
            raise NotFoundError("User not found")
        for tag_id in tag_ids:
            if await self.tag_repo.get_by_id(tag_id) is None:
                raise ValidationError(f"Invalid tag ID: {tag_id}")

        await self.tag_repo.replace_user_tags(user_id, tag_ids)
        await self.session.commit()
        return await self.tag_repo.tags_for_user(user_id)

    async def users_for_tags(self, tag_ids: list[str]) -> list[UserModel]:
        """List users carrying any of the given tags."""
        if not tag_ids:
            return []
        user_ids = await self.tag_repo.user_ids_for_tags(tag_ids)
        return await self.user_repo.list_by_ids(sorted(user_ids))
