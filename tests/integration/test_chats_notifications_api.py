"""Integration tests for chats and notifications."""

import pytest


async def declined_chat(client, make_proposal, user, headers) -> dict:
    proposal = await make_proposal(userIds=[user.id])
    await client.post(
        f"/api/proposals/{proposal['id']}/decline", json={"reason": "Busy"}, headers=headers
    )
    chats = (await client.get("/api/chats", headers=headers)).json()
    return chats[0]


@pytest.mark.asyncio
async def test_user_and_admin_exchange_messages(
    client, make_proposal, regular_user, user_headers, admin_headers
):
    chat = await declined_chat(client, make_proposal, regular_user, user_headers)

    posted = await client.post(
        f"/api/chats/{chat['id']}/messages", json={"message": "Any chance next month?"}, headers=admin_headers
    )
    assert posted.status_code == 201
    reply = await client.post(
        f"/api/chats/{chat['id']}/messages", json={"message": "Sure!"}, headers=user_headers
    )
    assert reply.status_code == 201

    messages = await client.get(f"/api/chats/{chat['id']}/messages", headers=admin_headers)
    assert [m["message"] for m in messages.json()] == [
        "I have declined this offer. Reason: Busy",
        "Any chance next month?",
        "Sure!",
    ]
    admin_chats = await client.get("/api/chats", headers=admin_headers)
    assert [c["id"] for c in admin_chats.json()] == [chat["id"]]


@pytest.mark.asyncio
async def test_other_users_cannot_read_chat(
    client, make_proposal, regular_user, user_headers, make_user, headers_for
):
    chat = await declined_chat(client, make_proposal, regular_user, user_headers)
    stranger = await make_user(email="stranger@example.com")

    read = await client.get(f"/api/chats/{chat['id']}/messages", headers=headers_for(stranger))
    assert read.status_code == 403
    write = await client.post(
        f"/api/chats/{chat['id']}/messages", json={"message": "hi"}, headers=headers_for(stranger)
    )
    assert write.status_code == 403


@pytest.mark.asyncio
async def test_empty_message_rejected(client, make_proposal, regular_user, user_headers):
    chat = await declined_chat(client, make_proposal, regular_user, user_headers)

    response = await client.post(
        f"/api/chats/{chat['id']}/messages", json={"message": "   "}, headers=user_headers
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Message is required"}


@pytest.mark.asyncio
async def test_unknown_chat(client, user_headers):
    response = await client.get("/api/chats/missing/messages", headers=user_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_mark_notification_read(client, make_proposal, regular_user, user_headers, make_user, headers_for):
    await make_proposal(userIds=[regular_user.id])
    notification = (await client.get("/api/notifications", headers=user_headers)).json()[0]

    other = await make_user(email="nosy@example.com")
    foreign = await client.post(
        f"/api/notifications/{notification['id']}/read", headers=headers_for(other)
    )
    assert foreign.status_code == 404

    marked = await client.post(f"/api/notifications/{notification['id']}/read", headers=user_headers)
    assert marked.json() == {"success": True}

    unread = await client.get("/api/notifications", params={"unread_only": "true"}, headers=user_headers)
    assert unread.json() == []
    everything = await client.get("/api/notifications", headers=user_headers)
    assert everything.json()[0]["is_read"] is True
