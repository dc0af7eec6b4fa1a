"""Tests for the HTTP boundary: home page payload, paging API and error mapping."""

import pytest
from httpx import ASGITransport, AsyncClient

from config.settings import settings
from database.crud import CommentCRUD, PostCRUD
from database.db import get_db
from database.models import UserRole
from src.main import app


@pytest.fixture
async def client(session_factory):
    async def _get_test_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_test_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


def auth(user):
    return {"Authorization": f"Bearer {user.id}"}


async def _seed_posts(session, user, category, count):
    crud = PostCRUD(session)
    return [
        await crud.create(user.id, category.id, f"post {i}", "body")
        for i in range(count)
    ]


class TestHome:
    async def test_guest_home_page(self, client, session, make_user, make_category):
        user = await make_user()
        category = await make_category("design")
        await _seed_posts(session, user, category, 3)

        response = await client.get("/", params={"size": 2})

        assert response.status_code == 200
        data = response.json()
        assert data["username"] == settings.GUEST_NICKNAME
        assert data["category"] == settings.ALL_CATEGORIES_LABEL
        assert len(data["posts"]) == 2
        assert data["has_next"] is True
        assert data["next_page"] == 1
        assert data["size"] == 2

    async def test_home_page_with_user_and_category(
        self, client, session, make_user, make_category
    ):
        user = await make_user()
        design = await make_category("design")
        travel = await make_category("travel")
        await _seed_posts(session, user, design, 1)
        await _seed_posts(session, user, travel, 2)

        response = await client.get("/", params={"category": "travel"}, headers=auth(user))

        data = response.json()
        assert data["username"] == user.nickname
        assert data["category"] == "travel"
        assert {p["category_name"] for p in data["posts"]} == {"travel"}
        assert data["has_next"] is False


class TestPostsApi:
    async def test_paged_posts_payload(self, client, session, make_user, make_category):
        user = await make_user()
        category = await make_category("design")
        await _seed_posts(session, user, category, 5)

        response = await client.get("/api/posts", params={"page": 2, "size": 2})

        assert response.status_code == 200
        data = response.json()
        assert data["page"] == 2
        assert data["size"] == 2
        assert data["total_elements"] == 5
        assert data["has_next"] is False
        assert [p["title"] for p in data["content"]] == ["post 0"]

    async def test_category_filter(self, client, session, make_user, make_category):
        user = await make_user()
        design = await make_category("design")
        travel = await make_category("travel")
        await _seed_posts(session, user, design, 2)
        await _seed_posts(session, user, travel, 1)

        filtered = await client.get("/api/posts", params={"category": "travel"})
        blank = await client.get("/api/posts", params={"category": "  "})

        assert filtered.json()["total_elements"] == 1
        assert [p["category_name"] for p in filtered.json()["content"]] == ["travel"]
        assert blank.json()["total_elements"] == 3

    async def test_create_update_delete_flow(self, client, make_user, make_category):
        user = await make_user()
        design = await make_category("design")
        travel = await make_category("travel")

        created = await client.post(
            "/api/posts",
            json={"category_id": design.id, "title": "New", "description": "body"},
            headers=auth(user),
        )
        assert created.status_code == 201
        post_id = created.json()["id"]

        updated = await client.put(
            f"/api/posts/{post_id}",
            json={"category_id": travel.id, "title": "Renamed", "description": "body"},
            headers=auth(user),
        )
        assert updated.status_code == 200
        assert updated.json()["category_name"] == "travel"

        deleted = await client.delete(f"/api/posts/{post_id}", headers=auth(user))
        assert deleted.status_code == 200

        missing = await client.get(f"/api/posts/{post_id}")
        assert missing.status_code == 404
        assert missing.json() == {"detail": f"Post {post_id} not found"}

    async def test_non_owner_gets_403(self, client, session, make_user, make_category):
        owner = await make_user()
        stranger = await make_user()
        category = await make_category("design")
        [post] = await _seed_posts(session, owner, category, 1)

        response = await client.delete(f"/api/posts/{post.id}", headers=auth(stranger))

        assert response.status_code == 403

    async def test_create_requires_identity(self, client, make_category):
        category = await make_category("design")

        response = await client.post(
            "/api/posts", json={"category_id": category.id, "title": "t", "description": "d"}
        )

        assert response.status_code in (401, 403)


class TestCommentsApi:
    async def test_comment_flow(self, client, session, make_user, make_category):
        author = await make_user()
        reader = await make_user()
        category = await make_category("design")
        [post] = await _seed_posts(session, author, category, 1)

        created = await client.post(
            f"/api/posts/{post.id}/comments", json={"content": "hi"}, headers=auth(reader)
        )
        assert created.status_code == 201
        comment_id = created.json()["id"]

        page = await client.get(f"/api/posts/{post.id}/comments", headers=auth(reader))
        [item] = page.json()["content"]
        assert item["is_mine"] is True
        assert item["author_nickname"] == reader.nickname

        forbidden = await client.put(
            f"/api/comments/{comment_id}", json={"content": "edited"}, headers=auth(author)
        )
        assert forbidden.status_code == 403

        edited = await client.put(
            f"/api/comments/{comment_id}", json={"content": "edited"}, headers=auth(reader)
        )
        assert edited.json()["content"] == "edited"

        deleted = await client.delete(f"/api/comments/{comment_id}", headers=auth(reader))
        assert deleted.status_code == 200
        assert not await CommentCRUD(session).exists(comment_id)

    async def test_comment_on_missing_post(self, client, make_user):
        user = await make_user()

        response = await client.post(
            "/api/posts/999/comments", json={"content": "hi"}, headers=auth(user)
        )

        assert response.status_code == 404


class TestCategoriesApi:
    async def test_category_in_use_is_conflict(self, client, session, make_user, make_category):
        admin = await make_user(role=UserRole.ADMIN)
        category = await make_category("busy")
        await _seed_posts(session, admin, category, 1)

        response = await client.delete(f"/api/categories/{category.id}", headers=auth(admin))

        assert response.status_code == 409

    async def test_only_admin_deletes_categories(self, client, make_user, make_category):
        user = await make_user()
        category = await make_category("empty")

        response = await client.delete(f"/api/categories/{category.id}", headers=auth(user))

        assert response.status_code == 403


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["service"] == settings.SERVICE_NAME
