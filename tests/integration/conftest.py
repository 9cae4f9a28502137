"""Shared fixtures for API integration tests."""

import pytest


def proposal_payload(**overrides) -> dict:
    payload = {
        "title": "Summer launch",
        "companyName": "Acme Drinks",
        "campaignStartDate": "2030-07-01",
        "campaignEndDate": "2030-07-31",
        "shortDescription": "Promote the new summer flavour",
        "content": "<p>Post one reel and two stories.</p>",
        "disclaimer": None,
        "emailTemplateBody": None,
        "userIds": [],
        "tagIds": [],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_proposal(client, admin_headers):
    """Create a proposal through the admin API and return its JSON."""

    async def _make(**overrides) -> dict:
        response = await client.post(
            "/api/admin/proposals", json=proposal_payload(**overrides), headers=admin_headers
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def payload():
    """Build a proposal request body."""
    return proposal_payload
