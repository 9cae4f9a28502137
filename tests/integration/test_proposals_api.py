"""Integration tests for proposal authoring and visibility."""

import base64

import pytest
from sqlalchemy import select

from collabportal.infrastructure.persistence.models import ProposalVisibilityModel


@pytest.mark.asyncio
async def test_create_proposal_notifies_audience(
    client, make_proposal, regular_user, user_headers, email_provider
):
    proposal = await make_proposal(userIds=[regular_user.id])

    assert proposal["user_ids"] == [regular_user.id]
    assert proposal["content"]["type"] == "rich-text"
    assert proposal["content_html"] == "<p>Post one reel and two stories.</p>"
    assert email_provider.sent == []

    notifications = await client.get("/api/notifications", headers=user_headers)
    assert [n["title"] for n in notifications.json()] == ["New proposal available"]
    assert notifications.json()[0]["related_proposal_id"] == proposal["id"]


@pytest.mark.asyncio
async def test_email_body_sends_announcement(client, make_proposal, regular_user, email_provider):
    await make_proposal(userIds=[regular_user.id], emailTemplateBody="<p>Paid collab!</p>")

    sent = email_provider.to("creator@example.com")
    assert len(sent) == 1
    assert sent[0]["subject"] == "New advertising opportunity: Summer launch"
    assert "Hi Casey," in sent[0]["text"]


@pytest.mark.asyncio
async def test_end_before_start_is_rejected(client, admin_headers, regular_user, payload):
    response = await client.post(
        "/api/admin/proposals",
        json=payload(
            userIds=[regular_user.id],
            campaignStartDate="2030-07-10",
            campaignEndDate="2030-07-01",
        ),
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Campaign end date must be after start date"}


@pytest.mark.asyncio
async def test_empty_audience_is_rejected(client, admin_headers, payload):
    response = await client.post("/api/admin/proposals", json=payload(), headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {"error": "Please select at least one user to view this proposal"}


@pytest.mark.asyncio
async def test_tag_with_no_members_is_rejected(client, admin_headers, payload):
    tag = await client.post("/api/admin/tags", json={"name": "Empty"}, headers=admin_headers)

    response = await client.post(
        "/api/admin/proposals", json=payload(tagIds=[tag.json()["id"]]), headers=admin_headers
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Please select at least one user to view this proposal"}


@pytest.mark.asyncio
async def test_unknown_user_is_rejected(client, admin_headers, payload):
    response = await client.post(
        "/api/admin/proposals", json=payload(userIds=["no-such-user"]), headers=admin_headers
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("Unknown user IDs")


@pytest.mark.asyncio
async def test_tag_members_get_visibility(
    client, admin_headers, make_proposal, make_user, headers_for
):
    member = await make_user(email="member@example.com", full_name="Tag Member")
    outsider = await make_user(email="outsider@example.com")
    tag = await client.post("/api/admin/tags", json={"name": "Beauty"}, headers=admin_headers)
    await client.put(
        f"/api/admin/users/{member.id}/tags",
        json={"tagIds": [tag.json()["id"]]},
        headers=admin_headers,
    )

    proposal = await make_proposal(tagIds=[tag.json()["id"]])

    assert proposal["user_ids"] == [member.id]
    visible = await client.get(f"/api/proposals/{proposal['id']}", headers=headers_for(member))
    assert visible.status_code == 200
    hidden = await client.get(f"/api/proposals/{proposal['id']}", headers=headers_for(outsider))
    assert hidden.status_code == 404
    assert hidden.json() == {"error": "Proposal not found"}
    listing = await client.get("/api/proposals", headers=headers_for(outsider))
    assert listing.json() == []


@pytest.mark.asyncio
async def test_update_replaces_audience_and_notifications(
    client, admin_headers, make_proposal, make_user, headers_for, payload
):
    first = await make_user(email="first@example.com")
    second = await make_user(email="second@example.com")
    proposal = await make_proposal(userIds=[first.id])

    response = await client.put(
        f"/api/admin/proposals/{proposal['id']}",
        json=payload(title="Summer launch v2", userIds=[second.id]),
        headers=admin_headers,
    )

    assert response.status_code == 200, response.text
    assert response.json()["title"] == "Summer launch v2"
    assert response.json()["user_ids"] == [second.id]

    first_notes = await client.get("/api/notifications", headers=headers_for(first))
    assert first_notes.json() == []
    second_notes = await client.get("/api/notifications", headers=headers_for(second))
    assert len(second_notes.json()) == 1
    gone = await client.get(f"/api/proposals/{proposal['id']}", headers=headers_for(first))
    assert gone.status_code == 404


@pytest.mark.asyncio
async def test_repeated_update_keeps_the_same_audience(
    client, admin_headers, make_proposal, make_user, headers_for, payload, db_session
):
    first = await make_user(email="first@example.com")
    second = await make_user(email="second@example.com")
    third = await make_user(email="third@example.com")
    proposal = await make_proposal(userIds=[first.id, second.id])
    body = payload(userIds=[second.id, third.id, third.id])

    for _ in range(2):
        response = await client.put(
            f"/api/admin/proposals/{proposal['id']}", json=body, headers=admin_headers
        )
        assert response.status_code == 200, response.text
        assert response.json()["user_ids"] == sorted([second.id, third.id])

    rows = await db_session.execute(
        select(ProposalVisibilityModel.user_id).where(
            ProposalVisibilityModel.proposal_id == proposal["id"]
        )
    )
    assert sorted(rows.scalars().all()) == sorted([second.id, third.id])
    third_notes = await client.get("/api/notifications", headers=headers_for(third))
    assert len(third_notes.json()) == 1


@pytest.mark.asyncio
async def test_update_rejects_past_start(client, admin_headers, make_proposal, regular_user, payload):
    proposal = await make_proposal(userIds=[regular_user.id])

    response = await client.put(
        f"/api/admin/proposals/{proposal['id']}",
        json=payload(
            userIds=[regular_user.id],
            campaignStartDate="2020-01-01",
            campaignEndDate="2030-01-01",
        ),
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Campaign start date cannot be in the past"}


@pytest.mark.asyncio
async def test_inline_images_are_uploaded(client, make_proposal, regular_user, tmp_path):
    image = base64.b64encode(b"fake-png").decode()

    proposal = await make_proposal(
        userIds=[regular_user.id],
        content=f'<p>Look</p><img src="data:image/png;base64,{image}">',
    )

    html = proposal["content_html"]
    assert "data:image" not in html
    assert 'src="http://test/storage/rich-text/rich-text-images/' in html
    uploaded = list((tmp_path / "storage" / "rich-text" / "rich-text-images").iterdir())
    assert [p.read_bytes() for p in uploaded] == [b"fake-png"]


@pytest.mark.asyncio
async def test_logo_upload(client, admin_headers):
    response = await client.post(
        "/api/admin/proposals/logo",
        files={"file": ("acme.png", b"logo-bytes", "image/png")},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["url"].startswith("http://test/storage/company-logos/")
    assert response.json()["url"].endswith(".png")


@pytest.mark.asyncio
async def test_logo_must_be_an_image(client, admin_headers):
    response = await client.post(
        "/api/admin/proposals/logo",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=admin_headers,
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_send_email_reports_per_user(
    client, admin_headers, make_proposal, regular_user, email_provider
):
    proposal = await make_proposal(userIds=[regular_user.id])

    response = await client.post(
        f"/api/admin/proposals/{proposal['id']}/send-email",
        json={"userIds": [regular_user.id, "missing-user"]},
        headers=admin_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Sent 1 of 2 emails"
    assert [r["success"] for r in body["results"]] == [True, False]
    assert len(email_provider.to("creator@example.com")) == 1


@pytest.mark.asyncio
async def test_delete_proposal(client, admin_headers, make_proposal, regular_user, user_headers):
    proposal = await make_proposal(userIds=[regular_user.id])

    deleted = await client.delete(f"/api/admin/proposals/{proposal['id']}", headers=admin_headers)
    assert deleted.status_code == 200

    again = await client.delete(f"/api/admin/proposals/{proposal['id']}", headers=admin_headers)
    assert again.status_code == 404
    listing = await client.get("/api/proposals", headers=user_headers)
    assert listing.json() == []
