"""Invitation entity types.

An invitation is a single-use, time-boxed credential that lets one email
address register. At most one invitation per email is ``pending`` at a time;
re-inviting refreshes that row instead of adding another.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from collabportal.domain.entities.clock import as_utc, utcnow


class InvitationStatus(str, Enum):
    """Invitation status enum."""

    PENDING = "pending"
    COMPLETED = "completed"


class InvitationRejection(str, Enum):
    """Why a validation attempt did not succeed."""

    NOT_FOUND = "not_found"
    NOT_PENDING = "not_pending"
    EXPIRED = "expired"


def is_expired(expires_at: datetime, now: datetime | None = None) -> bool:
    """Check whether an expiry timestamp lies in the past.

    Args:
        expires_at: Expiry timestamp, naive values are treated as UTC.
        now: Reference time, defaults to the current UTC time.

    Returns:
        True once ``now`` is strictly after ``expires_at``.
    """
    return (now or utcnow()) > as_utc(expires_at)


@dataclass(frozen=True)
class InvitationValidation:
    """Outcome of a single invitation validation attempt.

    Attributes:
        valid: Whether the invitation can be redeemed right now.
        reason: Why it cannot, when ``valid`` is False.
        invitation: The matching invitation record, if one was found.
    """

    valid: bool
    reason: InvitationRejection | None = None
    invitation: Any = None

    @property
    def message(self) -> str:
        """Human-readable message for the outcome."""
        if self.valid:
            return "Invitation is valid"
        if self.reason == InvitationRejection.EXPIRED:
            return "This invitation has expired"
        if self.reason == InvitationRejection.NOT_PENDING:
            return "Invitation is no longer valid"
        return "Invalid invitation token or email"


@dataclass(frozen=True)
class InviteResult:
    """Result of issuing (or re-issuing) an invitation."""

    invitation_id: str
    email: str
    handle_name: str | None
    token: str
    registration_url: str
    email_sent: bool
