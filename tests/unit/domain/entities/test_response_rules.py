"""Unit tests for the response workflow rules."""

from datetime import date

import pytest

from collabportal.domain.entities.response import (
    AdminResponseStatus,
    ProgressStatus,
    ResponseStatus,
    can_edit,
    decline_message,
    derive_progress,
    effective_admin_status,
    should_prompt_review,
)

TODAY = date(2026, 6, 15)


class TestCanEdit:
    def test_pending_review_is_editable(self):
        assert can_edit(AdminResponseStatus.PENDING, ResponseStatus.ACCEPTED) is True

    def test_update_requested_is_editable(self):
        assert can_edit(AdminResponseStatus.APPROVED, ResponseStatus.PENDING_UPDATE) is True

    def test_approved_is_locked(self):
        assert can_edit("approved", "accepted") is False

    def test_rejected_by_admin_is_locked(self):
        assert can_edit("rejected", "rejected") is False


class TestShouldPromptReview:
    def test_accepted_awaiting_review_is_not_prompted(self):
        assert should_prompt_review("pending", "accepted") is False

    def test_declined_awaiting_review_is_prompted(self):
        assert should_prompt_review("pending", "rejected") is True

    def test_update_requested_is_prompted(self):
        assert should_prompt_review("approved", "pending_update") is True

    def test_locked_response_is_not_prompted(self):
        assert should_prompt_review("approved", "accepted") is False


class TestEffectiveAdminStatus:
    def test_completed_campaign_overrides_admin_status(self):
        assert effective_admin_status(ProgressStatus.COMPLETED, AdminResponseStatus.APPROVED) == "completed"

    def test_admin_status_shown_otherwise(self):
        assert effective_admin_status("live", "approved") == "approved"

    def test_missing_admin_status(self):
        assert effective_admin_status(None, None) is None


class TestDeriveProgress:
    def test_rejected_response_has_no_progress(self):
        assert derive_progress("rejected", "live", "approved") == "no_response"

    def test_stored_progress_wins(self):
        assert derive_progress("accepted", "completed", "pending") == "completed"

    def test_accepted_awaiting_review(self):
        assert derive_progress("accepted", None, "pending") == "accepted"

    @pytest.mark.parametrize(
        "end_date,expected",
        [
            (date(2026, 6, 14), "completed"),
            (date(2026, 6, 15), "live"),
            (None, "live"),
        ],
    )
    def test_approved_depends_on_end_date(self, end_date, expected):
        assert derive_progress("accepted", None, "approved", end_date, today=TODAY) == expected

    def test_unknown_status(self):
        assert derive_progress(None, None, None) == "no_response"


def test_decline_message():
    assert decline_message("Budget too low") == "I have declined this offer. Reason: Budget too low"
