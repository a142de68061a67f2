from pathlib import Path

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/marketplace/listings"
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 32


async def create_listing(client: AsyncClient, headers, **overrides):
    body = {"title": "40L backpack", "description": "Carried it across Patagonia", "price": 45.0}
    body.update(overrides)
    return await client.post(BASE, json=body, headers=headers)


async def test_create_listing(client: AsyncClient, user_factory, auth_headers):
    seller = await user_factory()

    response = await create_listing(client, auth_headers(seller), category="Outdoor Gear")

    assert response.status_code == 201
    data = response.json()
    assert data["created_by"] == seller.id
    assert data["category"] == "Outdoor Gear"
    assert data["condition"] == "Good"
    assert data["status"] == "active"
    assert data["is_available"] is True
    assert data["location"]["coordinates"] == [0, 0]


async def test_create_listing_requires_fields(client: AsyncClient, user_factory, auth_headers):
    seller = await user_factory()

    response = await client.post(BASE, json={"title": "Tent"}, headers=auth_headers(seller))

    assert response.status_code == 400
    assert response.json()["detail"] == "Title, description, and price are required"


async def test_create_listing_requires_login(client: AsyncClient):
    response = await client.post(BASE, json={"title": "Tent", "description": "2 person", "price": 10})

    assert response.status_code == 401


async def test_browse_is_public_and_filtered(client: AsyncClient, user_factory, auth_headers):
    seller = await user_factory()
    headers = auth_headers(seller)
    cheap = (await create_listing(client, headers, title="Headlamp", price=8, location={"city": "Lyon"})).json()
    await create_listing(client, headers, title="Tent", description="Ultralight two person tent", price=180)

    everything = await client.get(BASE)
    by_price = await client.get(f"{BASE}?max_price=10")
    by_text = await client.get(f"{BASE}?search=ULTRALIGHT")
    by_city = await client.get(f"{BASE}?location=lyo")

    assert len(everything.json()) == 2
    assert [item["id"] for item in by_price.json()] == [cheap["id"]]
    assert [item["title"] for item in by_text.json()] == ["Tent"]
    assert [item["id"] for item in by_city.json()] == [cheap["id"]]


async def test_search_treats_wildcards_literally(client: AsyncClient, user_factory, auth_headers):
    seller = await user_factory()
    headers = auth_headers(seller)
    await create_listing(client, headers, title="Tent", description="Two person tent")
    shirt = (await create_listing(client, headers, title="Base layer", description="100% merino")).json()

    percent = await client.get(BASE, params={"search": "%"})
    underscore = await client.get(BASE, params={"search": "_"})
    literal = await client.get(BASE, params={"search": "100%"})

    assert [item["id"] for item in percent.json()] == [shirt["id"]]
    assert underscore.json() == []
    assert [item["id"] for item in literal.json()] == [shirt["id"]]


async def test_get_listing(client: AsyncClient, user_factory, auth_headers):
    seller = await user_factory()
    listing = (await create_listing(client, auth_headers(seller))).json()

    found = await client.get(f"{BASE}/{listing['id']}")
    missing = await client.get(f"{BASE}/9999")

    assert found.json()["title"] == "40L backpack"
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Listing not found"


async def test_update_listing(client: AsyncClient, user_factory, auth_headers):
    seller, other = await user_factory(), await user_factory()
    listing = (await create_listing(client, auth_headers(seller))).json()

    denied = await client.put(f"{BASE}/{listing['id']}", json={"price": 1}, headers=auth_headers(other))
    updated = await client.put(
        f"{BASE}/{listing['id']}", json={"price": 30, "status": "sold", "is_available": False}, headers=auth_headers(seller)
    )

    assert denied.status_code == 403
    assert denied.json()["detail"] == "You can only update your own listings"
    data = updated.json()
    assert data["price"] == 30
    assert data["status"] == "sold"
    assert data["is_available"] is False
    assert data["title"] == "40L backpack"


async def test_upload_listing_image_replaces_previous(client: AsyncClient, user_factory, auth_headers, upload_dir):
    seller = await user_factory()
    listing = (await create_listing(client, auth_headers(seller))).json()

    first = await client.post(
        f"{BASE}/{listing['id']}/image",
        files={"image": ("pack.jpg", JPEG_BYTES, "image/jpeg")},
        headers=auth_headers(seller),
    )
    second = await client.post(
        f"{BASE}/{listing['id']}/image",
        files={"image": ("pack-2.jpg", JPEG_BYTES, "image/jpeg")},
        headers=auth_headers(seller),
    )

    first_url, second_url = first.json()["image"], second.json()["image"]
    assert first_url.startswith("/uploads/marketplace/")
    assert second_url != first_url
    assert not (Path(upload_dir) / first_url.removeprefix("/uploads/")).exists()
    assert (Path(upload_dir) / second_url.removeprefix("/uploads/")).exists()


async def test_delete_listing_removes_image(client: AsyncClient, user_factory, auth_headers, upload_dir):
    seller, other = await user_factory(), await user_factory()
    listing = (await create_listing(client, auth_headers(seller))).json()
    image_url = (
        await client.post(
            f"{BASE}/{listing['id']}/image",
            files={"image": ("pack.jpg", JPEG_BYTES, "image/jpeg")},
            headers=auth_headers(seller),
        )
    ).json()["image"]

    denied = await client.delete(f"{BASE}/{listing['id']}", headers=auth_headers(other))
    deleted = await client.delete(f"{BASE}/{listing['id']}", headers=auth_headers(seller))

    assert denied.status_code == 403
    assert deleted.status_code == 204
    assert (await client.get(f"{BASE}/{listing['id']}")).status_code == 404
    assert not (Path(upload_dir) / image_url.removeprefix("/uploads/")).exists()
