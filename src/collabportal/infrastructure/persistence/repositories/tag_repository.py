"""Tag and user-tag repository."""

import uuid

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from collabportal.infrastructure.persistence.models import TagModel, UserTagModel


class TagRepository:
    """Repository for tags and tag membership."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_all(self) -> list[TagModel]:
        """List all tags ordered by name."""
        result = await self.session.execute(select(TagModel).order_by(TagModel.name))
        return list(result.scalars().all())

    async def get_by_id(self, tag_id: str) -> TagModel | None:
        """Get a tag by ID."""
        result = await self.session.execute(select(TagModel).where(TagModel.id == tag_id))
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> TagModel | None:
        """Get a tag by name, case-insensitively."""
        result = await self.session.execute(
            select(TagModel).where(func.lower(TagModel.name) == name.lower())
        )
        return result.scalar_one_or_none()

    async def create(self, tag: TagModel) -> TagModel:
        """Persist a new tag."""
        self.session.add(tag)
        await self.session.flush()
        return tag

    async def update(self, tag: TagModel) -> TagModel:
        """Flush pending changes to a tag."""
        await self.session.flush()
        return tag

    async def delete(self, tag_id: str) -> bool:
        """Delete a tag and its memberships.

        Returns:
            True if the tag existed.
        """
        await self.session.execute(delete(UserTagModel).where(UserTagModel.tag_id == tag_id))
        result = await self.session.execute(delete(TagModel).where(TagModel.id == tag_id))
        await self.session.flush()
        return result.rowcount > 0

    async def user_ids_for_tags(self, tag_ids: list[str]) -> set[str]:
        """Return users holding any of the given tags."""
        result = await self.session.execute(
            select(UserTagModel.user_id).where(UserTagModel.tag_id.in_(tag_ids)).distinct()
        )
        return set(result.scalars().all())

    async def tags_for_user(self, user_id: str) -> list[TagModel]:
        """List the tags a user holds."""
        result = await self.session.execute(
            select(TagModel)
            .join(UserTagModel, UserTagModel.tag_id == TagModel.id)
            .where(UserTagModel.user_id == user_id)
            .order_by(TagModel.name)
        )
        return list(result.scalars().all())

    async def add_user_tag(self, user_id: str, tag_id: str) -> UserTagModel:
        """Assign a tag to a user."""
        user_tag = UserTagModel(id=str(uuid.uuid4()), user_id=user_id, tag_id=tag_id)
        self.session.add(user_tag)
        await self.session.flush()
        return user_tag

    async def replace_user_tags(self, user_id: str, tag_ids: list[str]) -> None:
        """Replace all tags held by a user."""
        await self.session.execute(delete(UserTagModel).where(UserTagModel.user_id == user_id))
        for tag_id in dict.fromkeys(tag_ids):
            self.session.add(UserTagModel(id=str(uuid.uuid4()), user_id=user_id, tag_id=tag_id))
        await self.session.flush()
