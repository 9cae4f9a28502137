"""Response and admin-review workflow rules.

A user's response to a proposal moves through two status axes: the
response ``status`` set by the user (and flipped to ``pending_update`` when
an admin asks for changes) and the ``progress_status`` that tracks the
campaign itself. The admin's disposition lives on a separate admin response.

Everything here is pure; services persist the outcome.
"""

from datetime import date
from enum import Enum

from collabportal.domain.entities.clock import utc_today

DECLINE_MESSAGE_TEMPLATE = "I have declined this offer. Reason: {reason}"
ADMIN_REPLY_NOTIFICATION_TITLE = "Admin responded to your reply"


class ResponseStatus(str, Enum):
    """Status of a user's response."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"
    PENDING_UPDATE = "pending_update"


class ProgressStatus(str, Enum):
    """Campaign progress of a response."""

    NO_RESPONSE = "no_response"
    ACCEPTED = "accepted"
    LIVE = "live"
    COMPLETED = "completed"


class AdminResponseStatus(str, Enum):
    """Admin review disposition."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class PaymentMethod(str, Enum):
    """How the user wants to be paid."""

    BANK_TRANSFER = "bank_transfer"
    PAYPAL = "paypal"
    OTHER = "other"
    NONE = "none"


def _value(status: Enum | str | None) -> str | None:
    if isinstance(status, Enum):
        return status.value
    return status


def effective_admin_status(
    progress_status: ProgressStatus | str | None,
    admin_status: AdminResponseStatus | str | None,
) -> str | None:
    """Status shown for a reviewed response.

    A completed campaign reads as ``completed`` whatever the stored admin
    status says; otherwise the admin status is shown as-is.
    """
    if _value(progress_status) == ProgressStatus.COMPLETED.value:
        return AdminResponseStatus.COMPLETED.value
    return _value(admin_status)


def can_edit(
    admin_status: AdminResponseStatus | str | None,
    response_status: ResponseStatus | str | None,
) -> bool:
    """Whether the user may still change their response.

    Args:
        admin_status: Current admin review status, if reviewed.
        response_status: Current response status.

    Returns:
        True while the admin review is pending or an update was requested.
    """
    return (
        _value(admin_status) == AdminResponseStatus.PENDING.value
        or _value(response_status) == ResponseStatus.PENDING_UPDATE.value
    )


def should_prompt_review(
    admin_status: AdminResponseStatus | str | None,
    response_status: ResponseStatus | str | None,
) -> bool:
    """Whether the UI should prompt the user to revisit their response.

    Suppressed for an accepted response still awaiting review.
    """
    if (
        _value(response_status) == ResponseStatus.ACCEPTED.value
        and _value(admin_status) == AdminResponseStatus.PENDING.value
    ):
        return False
    return can_edit(admin_status, response_status)


def derive_progress(
    response_status: ResponseStatus | str | None,
    progress_status: ProgressStatus | str | None,
    admin_status: AdminResponseStatus | str | None,
    campaign_end_date: date | None = None,
    today: date | None = None,
) -> str:
    """Compute the progress of a response.

    A stored progress status wins; otherwise it is inferred from the
    response and admin statuses and the campaign end date.

    Args:
        response_status: Response status.
        progress_status: Stored progress status, if any.
        admin_status: Admin review status, if any.
        campaign_end_date: Last day of the campaign.
        today: Reference date, defaults to today in UTC.

    Returns:
        One of the ``ProgressStatus`` values.
    """
    status = _value(response_status)
    if status == ResponseStatus.REJECTED.value:
        return ProgressStatus.NO_RESPONSE.value
    if progress_status:
        return _value(progress_status)
    if status not in (ResponseStatus.ACCEPTED.value, ResponseStatus.PENDING_UPDATE.value):
        return ProgressStatus.NO_RESPONSE.value

    if _value(admin_status) != AdminResponseStatus.APPROVED.value:
        return ProgressStatus.ACCEPTED.value
    if campaign_end_date is not None:
        if campaign_end_date < (today or utc_today()):
            return ProgressStatus.COMPLETED.value
    return ProgressStatus.LIVE.value


def decline_message(reason: str) -> str:
    """Chat message posted when a user declines a proposal."""
    return DECLINE_MESSAGE_TEMPLATE.format(reason=reason)
