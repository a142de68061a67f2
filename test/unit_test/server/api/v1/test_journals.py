import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/journals"


def journal_body(**overrides):
    body = {
        "title": "Three days in Kyoto",
        "content": "Temples at dawn, ramen at midnight.",
        "location": {"name": "Kyoto", "country": "Japan"},
        "start_date": "2025-04-01",
        "end_date": "2025-04-03",
        "category": "culture",
        "mood": "happy",
        "weather": "sunny",
        "tags": ["temples"],
    }
    body.update(overrides)
    return body


async def write(client: AsyncClient, headers, **overrides):
    response = await client.post(f"{BASE}/", json=journal_body(**overrides), headers=headers)
    assert response.status_code == 201
    return response.json()


async def match_users(client: AsyncClient, auth_headers, first, second):
    for swiper, swiped in ((first, second), (second, first)):
        await client.post(
            "/api/v1/matches/swipe", json={"swiped_user_id": swiped.id, "action": "like"}, headers=auth_headers(swiper)
        )


async def test_create_journal(client: AsyncClient, user_factory, auth_headers):
    author = await user_factory()

    data = await write(client, auth_headers(author))

    assert data["user_id"] == author.id
    assert data["location"]["name"] == "Kyoto"
    assert data["privacy"] == "public"
    assert data["status"] == "published"
    assert data["is_edited"] is False
    assert data["like_count"] == 0
    assert data["comments"] == []


async def test_end_date_before_start_date(client: AsyncClient, user_factory, auth_headers):
    author = await user_factory()

    response = await client.post(
        f"{BASE}/", json=journal_body(start_date="2025-04-03", end_date="2025-04-01"), headers=auth_headers(author)
    )

    assert response.status_code == 422


async def test_anonymous_reader_sees_public_journal_only(client: AsyncClient, user_factory, auth_headers):
    author = await user_factory()
    public = await write(client, auth_headers(author))
    private = await write(client, auth_headers(author), privacy="private")

    assert (await client.get(f"{BASE}/{public['id']}")).status_code == 200
    denied = await client.get(f"{BASE}/{private['id']}")
    assert denied.status_code == 403
    assert denied.json()["detail"] == "You do not have permission to view this journal"


async def test_stale_token_reads_public_journal_anonymously(client: AsyncClient, user_factory, auth_headers):
    author = await user_factory()
    public = await write(client, auth_headers(author))
    private = await write(client, auth_headers(author), privacy="private")
    headers = {"Authorization": "Bearer expired-or-garbage"}

    assert (await client.get(f"{BASE}/{public['id']}", headers=headers)).status_code == 200
    assert (await client.get(f"{BASE}/{private['id']}", headers=headers)).status_code == 403


async def test_friends_journal_needs_a_match(client: AsyncClient, user_factory, auth_headers):
    author, friend, stranger = await user_factory(), await user_factory(), await user_factory()
    journal = await write(client, auth_headers(author), privacy="friends")
    await match_users(client, auth_headers, author, friend)

    assert (await client.get(f"{BASE}/{journal['id']}", headers=auth_headers(friend))).status_code == 200
    assert (await client.get(f"{BASE}/{journal['id']}", headers=auth_headers(stranger))).status_code == 403
    assert (await client.get(f"{BASE}/{journal['id']}", headers=auth_headers(author))).status_code == 200


async def test_unknown_journal(client: AsyncClient):
    response = await client.get(f"{BASE}/9999")

    assert response.status_code == 404
    assert response.json()["detail"] == "Journal not found"


async def test_feed(client: AsyncClient, user_factory, auth_headers):
    reader, friend, stranger = await user_factory(), await user_factory(), await user_factory()
    await match_users(client, auth_headers, reader, friend)
    public = await write(client, auth_headers(stranger))
    await write(client, auth_headers(stranger), privacy="friends")
    friends_only = await write(client, auth_headers(friend), privacy="friends")
    await write(client, auth_headers(friend), status="draft")
    own_private = await write(client, auth_headers(reader), privacy="private")

    response = await client.get(f"{BASE}/feed", headers=auth_headers(reader))

    assert response.status_code == 200
    data = response.json()
    assert [j["id"] for j in data["journals"]] == [own_private["id"], friends_only["id"], public["id"]]
    assert data["pagination"] == {"page": 1, "pages": 1, "total": 3}


async def test_search_by_category_and_author(client: AsyncClient, user_factory, auth_headers):
    first, second = await user_factory(), await user_factory()
    food = await write(client, auth_headers(first), category="food")
    await write(client, auth_headers(first), category="nature")
    await write(client, auth_headers(second), category="food")

    response = await client.get(f"{BASE}/?category=food&user={first.id}", headers=auth_headers(second))

    assert response.status_code == 200
    assert [j["id"] for j in response.json()["journals"]] == [food["id"]]


async def test_search_hides_journals_the_caller_may_not_see(client: AsyncClient, user_factory, auth_headers):
    author, friend, stranger = await user_factory(), await user_factory(), await user_factory()
    await match_users(client, auth_headers, author, friend)
    public = await write(client, auth_headers(author))
    friends_only = await write(client, auth_headers(author), privacy="friends")
    private = await write(client, auth_headers(author), privacy="private")

    def found(response):
        assert response.status_code == 200
        return {j["id"] for j in response.json()["journals"]}

    by_stranger = found(await client.get(f"{BASE}/?user={author.id}", headers=auth_headers(stranger)))
    private_by_stranger = found(
        await client.get(f"{BASE}/?user={author.id}&privacy=private", headers=auth_headers(stranger))
    )
    by_friend = found(await client.get(f"{BASE}/?user={author.id}", headers=auth_headers(friend)))
    by_author = found(await client.get(f"{BASE}/?user={author.id}", headers=auth_headers(author)))

    assert by_stranger == {public["id"]}
    assert private_by_stranger == set()
    assert by_friend == {public["id"], friends_only["id"]}
    assert by_author == {public["id"], friends_only["id"], private["id"]}


async def test_update_journal_marks_it_edited(client: AsyncClient, user_factory, auth_headers):
    author, other = await user_factory(), await user_factory()
    journal = await write(client, auth_headers(author))

    denied = await client.patch(f"{BASE}/{journal['id']}", json={"title": "Mine"}, headers=auth_headers(other))
    updated = await client.patch(
        f"{BASE}/{journal['id']}", json={"title": "Four days in Kyoto", "end_date": "2025-04-04"}, headers=auth_headers(author)
    )

    assert denied.status_code == 403
    assert denied.json()["detail"] == "You can only update your own journals"
    data = updated.json()
    assert data["title"] == "Four days in Kyoto"
    assert data["end_date"] == "2025-04-04"
    assert data["is_edited"] is True
    assert data["last_edited_at"] is not None


async def test_update_rejects_end_before_start(client: AsyncClient, user_factory, auth_headers):
    author = await user_factory()
    journal = await write(client, auth_headers(author))

    response = await client.patch(f"{BASE}/{journal['id']}", json={"end_date": "2025-03-01"}, headers=auth_headers(author))

    assert response.status_code == 400
    assert response.json()["detail"] == "End date must be after start date"


async def test_privacy_change_is_not_an_edit(client: AsyncClient, user_factory, auth_headers):
    author = await user_factory()
    journal = await write(client, auth_headers(author))

    response = await client.patch(f"{BASE}/{journal['id']}", json={"privacy": "friends"}, headers=auth_headers(author))

    assert response.json()["privacy"] == "friends"
    assert response.json()["is_edited"] is False


async def test_toggle_like(client: AsyncClient, user_factory, auth_headers):
    author, fan = await user_factory(), await user_factory()
    journal = await write(client, auth_headers(author))

    liked = await client.post(f"{BASE}/{journal['id']}/like", headers=auth_headers(fan))
    unliked = await client.post(f"{BASE}/{journal['id']}/like", headers=auth_headers(fan))

    assert liked.json() == {"liked": True, "like_count": 1}
    assert unliked.json() == {"liked": False, "like_count": 0}


async def test_comments(client: AsyncClient, user_factory, auth_headers):
    author, reader = await user_factory(), await user_factory()
    journal = await write(client, auth_headers(author))

    comment = await client.post(
        f"{BASE}/{journal['id']}/comments", json={"content": "  Great tips!  "}, headers=auth_headers(reader)
    )
    blank = await client.post(f"{BASE}/{journal['id']}/comments", json={"content": " "}, headers=auth_headers(reader))

    assert comment.status_code == 201
    assert comment.json()["content"] == "Great tips!"
    assert comment.json()["user_id"] == reader.id
    assert blank.status_code == 400
    assert blank.json()["detail"] == "Comment content is required"

    detail = await client.get(f"{BASE}/{journal['id']}")
    assert [c["content"] for c in detail.json()["comments"]] == ["Great tips!"]


async def test_cannot_comment_on_hidden_journal(client: AsyncClient, user_factory, auth_headers):
    author, reader = await user_factory(), await user_factory()
    journal = await write(client, auth_headers(author), privacy="private")

    response = await client.post(f"{BASE}/{journal['id']}/comments", json={"content": "hi"}, headers=auth_headers(reader))

    assert response.status_code == 403


async def test_delete_journal(client: AsyncClient, user_factory, auth_headers):
    author, other = await user_factory(), await user_factory()
    journal = await write(client, auth_headers(author))
    await client.post(f"{BASE}/{journal['id']}/like", headers=auth_headers(other))

    denied = await client.delete(f"{BASE}/{journal['id']}", headers=auth_headers(other))
    deleted = await client.delete(f"{BASE}/{journal['id']}", headers=auth_headers(author))

    assert denied.status_code == 403
    assert deleted.status_code == 204
    assert (await client.get(f"{BASE}/{journal['id']}")).status_code == 404
