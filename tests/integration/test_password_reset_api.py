"""Integration tests for the password reset flow."""

import re

import pytest

REQUEST_MESSAGE = "If an account with this email exists, you will receive a password reset link."


def reset_token_from(message: dict) -> str:
    match = re.search(r"token=([0-9a-f]{8})", message["text"])
    assert match, message["text"]
    return match.group(1)


@pytest.mark.asyncio
async def test_full_reset_flow(client, regular_user, email_provider):
    requested = await client.post(
        "/api/request-password-reset",
        json={"email": "Creator@Example.com"},
        headers={"Origin": "https://evil.example.com"},
    )
    assert requested.status_code == 200
    assert requested.json() == {"success": True, "message": REQUEST_MESSAGE}

    sent = email_provider.to("creator@example.com")
    assert len(sent) == 1
    assert "evil.example.com" not in sent[0]["text"]
    token = reset_token_from(sent[0])

    valid = await client.post(
        "/api/validate-password-reset", json={"email": "creator@example.com", "token": token}
    )
    assert valid.json()["valid"] is True
    assert valid.json()["token"]["email"] == "creator@example.com"

    reset = await client.post(
        "/api/reset-password-with-token",
        json={"email": "creator@example.com", "token": token, "newPassword": "fresh-password"},
    )
    assert reset.status_code == 200, reset.text
    assert reset.json()["message"] == "Password has been reset successfully"

    old_login = await client.post(
        "/api/auth/login", json={"email": "creator@example.com", "password": "secret-pass"}
    )
    assert old_login.status_code == 401
    new_login = await client.post(
        "/api/auth/login", json={"email": "creator@example.com", "password": "fresh-password"}
    )
    assert new_login.status_code == 200

    reused = await client.post(
        "/api/reset-password-with-token",
        json={"email": "creator@example.com", "token": token, "newPassword": "another-one"},
    )
    assert reused.status_code == 400
    assert reused.json() == {"error": "Invalid password reset token"}


@pytest.mark.asyncio
async def test_unknown_email_gets_same_answer(client, email_provider):
    response = await client.post("/api/request-password-reset", json={"email": "nobody@example.com"})

    assert response.status_code == 200
    assert response.json()["message"] == REQUEST_MESSAGE
    assert email_provider.sent == []


@pytest.mark.asyncio
async def test_missing_email_is_rejected(client):
    response = await client.post("/api/request-password-reset", json={})

    assert response.status_code == 400
    assert response.json() == {"error": "Email is required"}


@pytest.mark.asyncio
async def test_second_request_replaces_token(client, regular_user, email_provider):
    await client.post("/api/request-password-reset", json={"email": "creator@example.com"})
    await client.post("/api/request-password-reset", json={"email": "creator@example.com"})

    first, second = (reset_token_from(m) for m in email_provider.to("creator@example.com"))
    latest = await client.post(
        "/api/validate-password-reset", json={"email": "creator@example.com", "token": second}
    )
    assert latest.json()["valid"] is True
    stale = await client.post(
        "/api/validate-password-reset", json={"email": "creator@example.com", "token": first}
    )
    assert stale.json()["valid"] is False


@pytest.mark.asyncio
async def test_short_new_password(client, regular_user, email_provider):
    await client.post("/api/request-password-reset", json={"email": "creator@example.com"})
    token = reset_token_from(email_provider.to("creator@example.com")[0])

    response = await client.post(
        "/api/reset-password-with-token",
        json={"email": "creator@example.com", "token": token, "newPassword": "abc"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Password must be at least 6 characters long"}
    still_valid = await client.post(
        "/api/validate-password-reset", json={"email": "creator@example.com", "token": token}
    )
    assert still_valid.json()["valid"] is True
