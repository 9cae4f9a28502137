"""Unit tests for proposal entity validation."""

from datetime import date

import pytest

from collabportal.domain.entities.proposal import (
    ProposalDraft,
    build_document,
    document_html,
    validate_campaign_dates,
)
from collabportal.domain.exceptions import ValidationError


class TestValidateCampaignDates:
    def test_same_day_campaign_is_valid(self):
        validate_campaign_dates(date(2026, 3, 1), date(2026, 3, 1))

    def test_end_before_start(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_campaign_dates(date(2026, 3, 2), date(2026, 3, 1))
        assert exc_info.value.message == "Campaign end date must be after start date"
        assert exc_info.value.status_code == 400

    def test_missing_date(self):
        with pytest.raises(ValidationError, match="Both start and end dates are required"):
            validate_campaign_dates(None, date(2026, 3, 1))

    def test_past_start_only_rejected_when_asked(self):
        today = date(2026, 3, 10)
        validate_campaign_dates(date(2026, 3, 1), date(2026, 3, 20), today=today)
        with pytest.raises(ValidationError, match="cannot be in the past"):
            validate_campaign_dates(
                date(2026, 3, 1), date(2026, 3, 20), reject_past_start=True, today=today
            )


class TestProposalDraft:
    def test_title_required(self):
        with pytest.raises(ValidationError, match="Title is required"):
            ProposalDraft(
                title="  ",
                company_name="Acme",
                campaign_start_date=date(2026, 1, 1),
                campaign_end_date=date(2026, 1, 2),
            )

    def test_company_required(self):
        with pytest.raises(ValidationError, match="Company name is required"):
            ProposalDraft(
                title="Launch",
                company_name="",
                campaign_start_date=date(2026, 1, 1),
                campaign_end_date=date(2026, 1, 2),
            )


def test_document_round_trip():
    doc = build_document("<p>Hi</p>")
    assert doc["type"] == "rich-text"
    assert document_html(doc) == "<p>Hi</p>"
    assert document_html(None) == ""
    assert document_html("<p>raw</p>") == "<p>raw</p>"
