import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


async def test_get_public_profile(client: AsyncClient, user_factory, auth_headers):
    viewer = await user_factory()
    other = await user_factory(bio="Always packing light", age=31)

    response = await client.get(f"/api/v1/users/{other.id}", headers=auth_headers(viewer))

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == other.id
    assert data["bio"] == "Always packing light"
    assert "email" not in data
    assert "password_hash" not in data


async def test_get_unknown_user(client: AsyncClient, user_factory, auth_headers):
    viewer = await user_factory()

    response = await client.get("/api/v1/users/9999", headers=auth_headers(viewer))

    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"


async def test_update_profile(client: AsyncClient, user_factory, auth_headers):
    user = await user_factory()
    payload = {
        "name": "  Renamed  ",
        "bio": "Mountains over beaches",
        "age": 29,
        "personality_type": "adventurer",
        "location": {"coordinates": [2.35, 48.85], "city": "Paris"},
        "travel_preferences": {"budget": "budget", "interests": ["history"]},
    }

    response = await client.put("/api/v1/users/profile", json=payload, headers=auth_headers(user))

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Renamed"
    assert data["personality_type"] == "adventurer"
    assert data["location"] == {"coordinates": [2.35, 48.85], "city": "Paris"}
    assert data["travel_preferences"] == {"budget": "budget", "interests": ["history"]}


async def test_update_profile_ignores_protected_fields(client: AsyncClient, user_factory, auth_headers):
    user = await user_factory()

    response = await client.put(
        "/api/v1/users/profile",
        json={"bio": "hi", "role": "admin", "email": "new@example.com"},
        headers=auth_headers(user),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["role"] == "user"
    assert data["email"] == user.email


async def test_update_profile_rejects_underage(client: AsyncClient, user_factory, auth_headers):
    user = await user_factory()

    response = await client.put("/api/v1/users/profile", json={"age": 12}, headers=auth_headers(user))

    assert response.status_code == 422


async def test_upload_profile_picture(client: AsyncClient, user_factory, auth_headers):
    user = await user_factory()

    response = await client.post(
        "/api/v1/users/upload-profile-picture",
        files={"profile_picture": ("me.png", PNG_BYTES, "image/png")},
        headers=auth_headers(user),
    )

    assert response.status_code == 200
    url = response.json()["profile_picture"]
    assert url.startswith("/uploads/profile-pictures/")
    assert url.endswith("-me.png")
    assert response.json()["user"]["profile_picture"] == url

    served = await client.get(url)
    assert served.status_code == 200
    assert served.content == PNG_BYTES


async def test_upload_profile_picture_rejects_non_images(client: AsyncClient, user_factory, auth_headers):
    user = await user_factory()

    response = await client.post(
        "/api/v1/users/upload-profile-picture",
        files={"profile_picture": ("notes.txt", b"hello", "text/plain")},
        headers=auth_headers(user),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Only image files are allowed"


async def test_upload_profile_picture_requires_file(client: AsyncClient, user_factory, auth_headers):
    user = await user_factory()

    response = await client.post("/api/v1/users/upload-profile-picture", headers=auth_headers(user))

    assert response.status_code == 400
    assert response.json()["detail"] == "Please upload a file"


async def test_list_users_is_admin_only(client: AsyncClient, user_factory, auth_headers):
    user = await user_factory()

    response = await client.get("/api/v1/users/", headers=auth_headers(user))

    assert response.status_code == 403


async def test_admin_lists_users(client: AsyncClient, user_factory, auth_headers):
    admin = await user_factory(role="admin")
    await user_factory()

    response = await client.get("/api/v1/users/", headers=auth_headers(admin))

    assert response.status_code == 200
    assert len(response.json()) == 2
