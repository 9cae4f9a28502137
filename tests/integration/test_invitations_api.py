"""Integration tests for the invitation lifecycle."""

import pytest


async def invite(client, headers, email, **extra):
    response = await client.post(
        "/api/admin/invite-user",
        json={"email": email, **extra},
        headers={**headers, "Origin": "https://portal.example.com"},
    )
    assert response.status_code == 200, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_invite_verify_and_register(client, admin_headers, email_provider):
    data = await invite(client, admin_headers, "Invitee@Example.com", handleName="@invitee")

    assert data["email"] == "invitee@example.com"
    assert data["email_sent"] is True
    assert data["registration_url"].startswith(
        "https://portal.example.com/complete-registration?email=invitee%40example.com"
    )
    assert len(email_provider.to("invitee@example.com")) == 1

    verify = await client.get(
        "/api/admin/verify-invitation",
        params={"email": "invitee@example.com", "token": data["token"]},
    )
    assert verify.status_code == 200
    assert verify.json()["valid"] is True
    assert "token" not in verify.json()["invitation"]

    created = await client.post(
        "/api/admin/create-user",
        json={
            "email": "invitee@example.com",
            "password": "brand-new-pass",
            "fullName": "In Vitee",
            "token": data["token"],
            "phoneNumber": "555-0199",
        },
    )
    assert created.status_code == 200, created.text
    assert created.json()["user"]["full_name"] == "In Vitee"

    login = await client.post(
        "/api/auth/login", json={"email": "invitee@example.com", "password": "brand-new-pass"}
    )
    assert login.status_code == 200
    assert login.json()["user"]["role"] == "user"

    again = await client.get(
        "/api/admin/verify-invitation",
        params={"email": "invitee@example.com", "token": data["token"]},
    )
    assert again.status_code == 400
    assert again.json() == {"valid": False, "message": "Invitation is no longer valid"}


@pytest.mark.asyncio
async def test_verify_unknown_token_is_not_found(client):
    response = await client.get(
        "/api/admin/verify-invitation", params={"email": "ghost@example.com", "token": "000000"}
    )

    assert response.status_code == 404
    assert response.json()["valid"] is False


@pytest.mark.asyncio
async def test_create_user_with_wrong_token(client, admin_headers):
    await invite(client, admin_headers, "wrong@example.com")

    response = await client.post(
        "/api/admin/create-user",
        json={"email": "wrong@example.com", "password": "brand-new-pass", "token": "zzzzzz"},
    )

    assert response.status_code == 403
    assert response.json() == {
        "error": "Invalid or expired invitation. Please request a new invitation."
    }


@pytest.mark.asyncio
async def test_create_user_requires_token(client):
    response = await client.post(
        "/api/admin/create-user", json={"email": "a@example.com", "password": "brand-new-pass"}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Registration token is required"}


@pytest.mark.asyncio
async def test_reinvite_keeps_single_pending_invitation(client, admin_headers):
    first = await invite(client, admin_headers, "repeat@example.com")
    second = await invite(client, admin_headers, "repeat@example.com")

    pending = await client.get("/api/admin/pending-invitations", headers=admin_headers)

    assert second["invitation_id"] == first["invitation_id"]
    emails = [i["email"] for i in pending.json()["invitations"]]
    assert emails.count("repeat@example.com") == 1


@pytest.mark.asyncio
async def test_delete_invitation(client, admin_headers):
    data = await invite(client, admin_headers, "gone@example.com")

    response = await client.request(
        "DELETE",
        "/api/admin/delete-invitation",
        json={"invitationId": data["invitation_id"]},
        headers=admin_headers,
    )
    assert response.status_code == 200

    missing = await client.request(
        "DELETE",
        "/api/admin/delete-invitation",
        json={"invitationId": data["invitation_id"]},
        headers=admin_headers,
    )
    assert missing.status_code == 404
    assert missing.json() == {"error": "Invitation not found"}


@pytest.mark.asyncio
async def test_bulk_invite_and_signup_with_tag(client, admin_headers, email_provider):
    tag = await client.post(
        "/api/admin/tags", json={"name": "Fitness", "color": "#00AA00"}, headers=admin_headers
    )
    assert tag.status_code == 201
    tag_id = tag.json()["id"]

    bulk = await client.post(
        "/api/admin/bulk-invite",
        json={"emails": ["one@example.com", "ONE@example.com", "two@example.com"], "tagId": tag_id},
        headers=admin_headers,
    )
    assert bulk.status_code == 200
    body = bulk.json()
    assert body["summary"] == {"total": 2, "successful": 2, "failed": 0}
    result = next(r for r in body["results"] if r["email"] == "one@example.com")
    assert f"&tag={tag_id}" in result["registration_url"]

    check = await client.post(
        "/api/validate-invite", json={"email": "one@example.com", "token": result["token"]}
    )
    assert check.status_code == 200
    assert check.json()["valid"] is True

    signup = await client.post(
        "/api/signup-with-invite",
        json={
            "email": "one@example.com",
            "password": "fit-and-well",
            "fullName": "Fit One",
            "inviteToken": result["token"],
            "tagId": tag_id,
        },
    )
    assert signup.status_code == 200, signup.text
    signed_up = signup.json()
    assert signed_up["tag"]["name"] == "Fitness"
    assert signed_up["userData"]["full_name"] == "Fit One"

    members = await client.get(
        "/api/admin/tags/users", params={"tag_ids": tag_id}, headers=admin_headers
    )
    assert [u["email"] for u in members.json()] == ["one@example.com"]


@pytest.mark.asyncio
async def test_validate_invite_never_errors(client):
    response = await client.post("/api/validate-invite", json={"email": "x@example.com"})

    assert response.status_code == 200
    assert response.json() == {"valid": False, "message": "Email and token are required"}


@pytest.mark.asyncio
async def test_bulk_invite_requires_tag(client, admin_headers):
    response = await client.post(
        "/api/admin/bulk-invite", json={"emails": ["a@example.com"]}, headers=admin_headers
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Tag ID is required"}
