"""Integration tests for responding to proposals and the admin review."""

import pytest


def acceptance(**overrides) -> dict:
    body = {
        "quote": 450.0,
        "proposedPublishDate": "2030-07-15",
        "platforms": ["instagram", "tiktok"],
        "paymentMethod": "bank_transfer",
        "message": None,
        "disclaimerAccepted": True,
    }
    body.update(overrides)
    return body


async def chat_messages(client, headers) -> list[str]:
    chats = (await client.get("/api/chats", headers=headers)).json()
    assert len(chats) == 1
    messages = await client.get(f"/api/chats/{chats[0]['id']}/messages", headers=headers)
    return [m["message"] for m in messages.json()]


@pytest.fixture
async def proposal(make_proposal, regular_user):
    return await make_proposal(
        userIds=[regular_user.id], disclaimer="Posts must be labelled as advertising"
    )


@pytest.mark.asyncio
async def test_accept_review_and_complete(client, proposal, user_headers, admin_headers):
    missing_disclaimer = await client.post(
        f"/api/proposals/{proposal['id']}/accept",
        json=acceptance(disclaimerAccepted=False),
        headers=user_headers,
    )
    assert missing_disclaimer.status_code == 400
    assert missing_disclaimer.json() == {"error": "You must accept the disclaimer to proceed"}

    accepted = await client.post(
        f"/api/proposals/{proposal['id']}/accept", json=acceptance(), headers=user_headers
    )
    assert accepted.status_code == 201, accepted.text
    response_id = accepted.json()["id"]
    assert accepted.json()["status"] == "accepted"
    assert accepted.json()["progress_status"] == "accepted"

    duplicate = await client.post(
        f"/api/proposals/{proposal['id']}/accept", json=acceptance(), headers=user_headers
    )
    assert duplicate.status_code == 409

    mine = (await client.get("/api/responses", headers=user_headers)).json()
    assert mine[0]["admin_response"]["status"] == "pending"
    assert mine[0]["can_edit"] is True
    assert mine[0]["should_prompt_review"] is False

    admin_notes = (await client.get("/api/notifications", headers=admin_headers)).json()
    assert admin_notes[0]["title"] == "New response received"
    assert admin_notes[0]["message"] == 'Casey Creator accepted "Summer launch"'

    reviewed = await client.post(
        f"/api/admin/responses/{response_id}/review",
        json={"status": "approved", "message": "Great, go ahead!"},
        headers=admin_headers,
    )
    assert reviewed.status_code == 200, reviewed.text
    view = reviewed.json()
    assert view["effective_status"] == "approved"
    assert view["progress"] == "live"
    assert view["can_edit"] is False
    assert view["response"]["admin_approved_at"] is not None

    assert "Great, go ahead!" in await chat_messages(client, user_headers)
    user_notes = (await client.get("/api/notifications?unread_only=true", headers=user_headers)).json()
    assert "Admin responded to your reply" in [n["title"] for n in user_notes]

    locked = await client.put(
        f"/api/responses/{response_id}", json=acceptance(quote=500.0), headers=user_headers
    )
    assert locked.status_code == 403
    assert locked.json() == {"error": "This response can no longer be edited"}

    completed = await client.post(
        f"/api/admin/responses/{response_id}/complete", headers=admin_headers
    )
    assert completed.status_code == 200
    assert completed.json()["effective_status"] == "completed"
    assert completed.json()["progress"] == "completed"

    user_notes = (await client.get("/api/notifications?unread_only=true", headers=user_headers)).json()
    assert "Admin responded to your reply" not in [n["title"] for n in user_notes]


@pytest.mark.asyncio
async def test_requested_update_reopens_response(client, proposal, user_headers, admin_headers):
    accepted = await client.post(
        f"/api/proposals/{proposal['id']}/accept", json=acceptance(), headers=user_headers
    )
    response_id = accepted.json()["id"]

    reviewed = await client.post(
        f"/api/admin/responses/{response_id}/review",
        json={"status": "rejected", "message": "Please lower the quote", "requestUpdate": True},
        headers=admin_headers,
    )
    assert reviewed.json()["response"]["status"] == "pending_update"
    assert reviewed.json()["can_edit"] is True
    assert reviewed.json()["should_prompt_review"] is True

    resubmitted = await client.put(
        f"/api/responses/{response_id}", json=acceptance(quote=300.0), headers=user_headers
    )
    assert resubmitted.status_code == 200, resubmitted.text
    assert resubmitted.json()["quote"] == 300.0
    assert resubmitted.json()["status"] == "accepted"

    view = (await client.get(f"/api/admin/responses/{response_id}", headers=admin_headers)).json()
    assert view["admin_response"]["status"] == "pending"


@pytest.mark.asyncio
async def test_decline_posts_reason_to_chat(client, proposal, user_headers, admin_headers):
    declined = await client.post(
        f"/api/proposals/{proposal['id']}/decline",
        json={"reason": "Not my audience"},
        headers=user_headers,
    )

    assert declined.status_code == 201
    assert declined.json()["status"] == "rejected"
    assert declined.json()["progress_status"] == "no_response"
    assert await chat_messages(client, user_headers) == [
        "I have declined this offer. Reason: Not my audience"
    ]

    listing = await client.get(
        "/api/admin/responses", params={"proposal_id": proposal["id"]}, headers=admin_headers
    )
    assert [v["response"]["id"] for v in listing.json()] == [declined.json()["id"]]


@pytest.mark.asyncio
async def test_decline_requires_reason(client, proposal, user_headers):
    response = await client.post(
        f"/api/proposals/{proposal['id']}/decline", json={"reason": "  "}, headers=user_headers
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Please provide a reason for declining"}


@pytest.mark.asyncio
async def test_publish_date_outside_campaign(client, proposal, user_headers):
    response = await client.post(
        f"/api/proposals/{proposal['id']}/accept",
        json=acceptance(proposedPublishDate="2030-08-15"),
        headers=user_headers,
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Publish date must be between 2030-07-01 and 2030-07-31"}


@pytest.mark.asyncio
async def test_hidden_proposal_cannot_be_answered(client, proposal, make_user, headers_for):
    outsider = await make_user(email="outsider@example.com")

    response = await client.post(
        f"/api/proposals/{proposal['id']}/accept", json=acceptance(), headers=headers_for(outsider)
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_users_only_see_their_own_responses(
    client, proposal, user_headers, make_user, headers_for
):
    accepted = await client.post(
        f"/api/proposals/{proposal['id']}/accept", json=acceptance(), headers=user_headers
    )
    other = await make_user(email="other@example.com")

    response = await client.get(f"/api/responses/{accepted.json()['id']}", headers=headers_for(other))

    assert response.status_code == 404
