"""Proposal visibility management.

Visibility is the set of users who may see a proposal. It is the union of
users picked explicitly and users holding any of the chosen tags, stored as
one row per user.
"""

from collabportal.core.logging import get_logger
from collabportal.domain.exceptions import ValidationError
from collabportal.infrastructure.persistence.repositories import (
    ProposalRepository,
    TagRepository,
    VisibilityRepository,
)

logger = get_logger(__name__)

EMPTY_SELECTION_MESSAGE = "Please select at least one user to view this proposal"


class VisibilityService:
    """Computes and stores who can see a proposal.

    Methods flush but never commit; they run inside the caller's transaction.
    """

    def __init__(
        self,
        visibility_repo: VisibilityRepository,
        tag_repo: TagRepository,
        proposal_repo: ProposalRepository,
    ) -> None:
        self.visibility_repo = visibility_repo
        self.tag_repo = tag_repo
        self.proposal_repo = proposal_repo

    async def compute_users_for_tags(self, tag_ids: list[str]) -> set[str]:
        """Return users holding any of the given tags.

        An empty tag list yields an empty set without touching the store.
        """
        if not tag_ids:
            return set()
        return await self.tag_repo.user_ids_for_tags(list(tag_ids))

    async def resolve_selection(self, user_ids: list[str], tag_ids: list[str]) -> list[str]:
        """Merge explicit and tag-derived users, keeping first-seen order.

        Raises:
            ValidationError: If the merged selection is empty.
        """
        selected = list(dict.fromkeys(user_ids))
        for user_id in sorted(await self.compute_users_for_tags(tag_ids)):
            if user_id not in selected:
                selected.append(user_id)
        ensure_selection(selected)
        return selected

    async def apply_on_create(self, proposal_id: str, user_ids: list[str]) -> None:
        """Insert visibility rows for a new proposal.

        Raises:
            ValidationError: If no users were selected.
        """
        ensure_selection(user_ids)
        await self.visibility_repo.insert_many(proposal_id, list(dict.fromkeys(user_ids)))

    async def replace(self, proposal_id: str, user_ids: list[str]) -> tuple[set[str], set[str]]:
        """Replace the visibility list of a proposal.

        Args:
            proposal_id: Proposal to update.
            user_ids: The new full set of users.

        Returns:
            Tuple of (previous user IDs, new user IDs).

        Raises:
            ValidationError: If no users were selected.
        """
        ensure_selection(user_ids)
        new_ids = list(dict.fromkeys(user_ids))
        old_ids = await self.visibility_repo.user_ids_for(proposal_id)
        await self.visibility_repo.delete_all(proposal_id)
        await self.visibility_repo.insert_many(proposal_id, new_ids)
        logger.debug(
            "Visibility replaced",
            proposal_id=proposal_id,
            added=len(set(new_ids) - old_ids),
            removed=len(old_ids - set(new_ids)),
        )
        return old_ids, set(new_ids)

    async def user_ids_for(self, proposal_id: str) -> set[str]:
        """IDs of the users who can see a proposal."""
        return await self.visibility_repo.user_ids_for(proposal_id)

    async def is_visible(self, proposal_id: str, user_id: str) -> bool:
        """Check whether a user can see a proposal."""
        return await self.visibility_repo.is_visible(proposal_id, user_id)

    async def visible_proposal_ids(self, user_id: str) -> list[str]:
        """IDs of the proposals a user can see, newest first."""
        return [p.id for p in await self.proposal_repo.list_visible_to(user_id)]


def ensure_selection(user_ids: list[str]) -> None:
    """Reject an empty user selection."""
    if not user_ids:
        raise ValidationError(EMPTY_SELECTION_MESSAGE)
