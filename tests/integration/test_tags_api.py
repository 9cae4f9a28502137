"""Integration tests for tag management."""

import pytest


@pytest.mark.asyncio
async def test_tag_crud(client, admin_headers):
    created = await client.post("/api/admin/tags", json={"name": " Travel "}, headers=admin_headers)
    assert created.status_code == 201
    tag = created.json()
    assert tag["name"] == "Travel"
    assert tag["color"] == "#FFB900"

    duplicate = await client.post("/api/admin/tags", json={"name": "travel"}, headers=admin_headers)
    assert duplicate.status_code == 409

    renamed = await client.put(
        f"/api/admin/tags/{tag['id']}",
        json={"name": "Travel & Food", "color": "#123456"},
        headers=admin_headers,
    )
    assert renamed.status_code == 200
    assert renamed.json()["name"] == "Travel & Food"
    assert renamed.json()["color"] == "#123456"

    listing = await client.get("/api/admin/tags", headers=admin_headers)
    assert [t["name"] for t in listing.json()] == ["Travel & Food"]

    deleted = await client.delete(f"/api/admin/tags/{tag['id']}", headers=admin_headers)
    assert deleted.status_code == 200
    missing = await client.delete(f"/api/admin/tags/{tag['id']}", headers=admin_headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_tag_name_required(client, admin_headers):
    response = await client.post("/api/admin/tags", json={"name": "   "}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {"error": "Tag name is required"}


@pytest.mark.asyncio
async def test_user_tags_are_replaced(client, admin_headers, regular_user):
    food = (await client.post("/api/admin/tags", json={"name": "Food"}, headers=admin_headers)).json()
    tech = (await client.post("/api/admin/tags", json={"name": "Tech"}, headers=admin_headers)).json()

    await client.put(
        f"/api/admin/users/{regular_user.id}/tags",
        json={"tagIds": [food["id"], tech["id"]]},
        headers=admin_headers,
    )
    response = await client.put(
        f"/api/admin/users/{regular_user.id}/tags",
        json={"tagIds": [tech["id"]]},
        headers=admin_headers,
    )

    assert [t["name"] for t in response.json()] == ["Tech"]
    food_members = await client.get(
        "/api/admin/tags/users", params={"tag_ids": food["id"]}, headers=admin_headers
    )
    assert food_members.json() == []
    all_members = await client.get(
        "/api/admin/tags/users",
        params={"tag_ids": f"{food['id']},{tech['id']}"},
        headers=admin_headers,
    )
    assert [u["id"] for u in all_members.json()] == [regular_user.id]


@pytest.mark.asyncio
async def test_assigning_unknown_tag(client, admin_headers, regular_user):
    response = await client.put(
        f"/api/admin/users/{regular_user.id}/tags",
        json={"tagIds": ["nope"]},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid tag ID: nope"}
