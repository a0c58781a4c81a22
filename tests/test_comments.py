"""
Comment endpoint tests: every route needs a bearer token; comments must
reference an existing post and are returned camelCase.
"""
import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.config import settings
from blog_api.models import Comment
from helpers import bearer, create_comment, create_post, register_and_login

COMMENT_KEYS = {"id", "postId", "content", "userId", "createdAt", "updatedAt"}


# ---------------------------------------------------------------------------
# Auth gate
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
@pytest.mark.parametrize("method, path", [
    ("GET", "/api/comments"),
    ("GET", "/api/comments/1"),
    ("POST", "/api/comments"),
    ("PUT", "/api/comments/1"),
    ("DELETE", "/api/comments/1"),
])
async def test_comment_routes_require_token(async_client: AsyncClient, method: str, path: str):
    resp = await async_client.request(method, path, json={"content": "x", "post_id": 1})
    assert resp.status_code == 401
    assert resp.json() == {"message": "Unauthenticated."}


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_comment(async_client: AsyncClient, auth_headers: dict):
    post = await create_post(async_client, auth_headers)

    resp = await async_client.post("/api/comments", json={
        "content": "Great post!", "post_id": post["id"],
    }, headers=auth_headers)
    assert resp.status_code == 201
    comment = resp.json()
    assert set(comment) == COMMENT_KEYS
    assert comment["content"] == "Great post!"
    assert comment["postId"] == post["id"]
    assert comment["userId"] == post["userId"]


@pytest.mark.asyncio
async def test_create_comment_accepts_camel_case_post_id(async_client: AsyncClient, auth_headers: dict):
    post = await create_post(async_client, auth_headers)
    resp = await async_client.post("/api/comments", json={
        "content": "Camel", "postId": post["id"],
    }, headers=auth_headers)
    assert resp.status_code == 201
    assert resp.json()["postId"] == post["id"]


@pytest.mark.asyncio
async def test_create_comment_unknown_post(
    async_client: AsyncClient, auth_headers: dict, db_session: AsyncSession
):
    resp = await async_client.post("/api/comments", json={
        "content": "Orphan", "post_id": 99999,
    }, headers=auth_headers)
    assert resp.status_code == 422
    assert "post_id" in resp.json()["errors"]

    count = (await db_session.execute(select(func.count()).select_from(Comment))).scalar_one()
    assert count == 0


@pytest.mark.asyncio
async def test_create_comment_missing_fields(async_client: AsyncClient, auth_headers: dict):
    resp = await async_client.post("/api/comments", json={}, headers=auth_headers)
    assert resp.status_code == 422
    errors = resp.json()["errors"]
    assert "content" in errors
    assert "post_id" in errors


@pytest.mark.asyncio
async def test_create_comment_blank_content(async_client: AsyncClient, auth_headers: dict):
    post = await create_post(async_client, auth_headers)
    resp = await async_client.post("/api/comments", json={
        "content": "  ", "post_id": post["id"],
    }, headers=auth_headers)
    assert resp.status_code == 422
    assert "content" in resp.json()["errors"]


# ---------------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_list_comments(async_client: AsyncClient, auth_headers: dict):
    post = await create_post(async_client, auth_headers)
    for i in range(3):
        await create_comment(async_client, auth_headers, post["id"], content=f"Comment {i}")

    resp = await async_client.get("/api/comments", headers=auth_headers)
    assert resp.status_code == 200
    comments = resp.json()
    assert [c["content"] for c in comments] == ["Comment 0", "Comment 1", "Comment 2"]
    assert all(set(c) == COMMENT_KEYS for c in comments)


@pytest.mark.asyncio
async def test_get_comment_round_trip(async_client: AsyncClient, auth_headers: dict):
    post = await create_post(async_client, auth_headers)
    created = await create_comment(async_client, auth_headers, post["id"], content="Keep")

    resp = await async_client.get(f"/api/comments/{created['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json() == created


@pytest.mark.asyncio
async def test_get_comment_not_found(async_client: AsyncClient, auth_headers: dict):
    resp = await async_client.get("/api/comments/99999", headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json() == {"message": "Comment not found"}


# ---------------------------------------------------------------------------
# Update / delete
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_update_comment(async_client: AsyncClient, auth_headers: dict):
    post = await create_post(async_client, auth_headers)
    comment = await create_comment(async_client, auth_headers, post["id"])

    resp = await async_client.put(f"/api/comments/{comment['id']}", json={
        "content": "Edited",
    }, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["content"] == "Edited"
    assert resp.json()["postId"] == post["id"]


@pytest.mark.asyncio
async def test_update_comment_ignores_post_id(async_client: AsyncClient, auth_headers: dict):
    first = await create_post(async_client, auth_headers, title="A")
    second = await create_post(async_client, auth_headers, title="B")
    comment = await create_comment(async_client, auth_headers, first["id"])

    resp = await async_client.put(f"/api/comments/{comment['id']}", json={
        "post_id": second["id"],
    }, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["postId"] == first["id"]


@pytest.mark.asyncio
async def test_update_comment_empty_content(async_client: AsyncClient, auth_headers: dict):
    post = await create_post(async_client, auth_headers)
    comment = await create_comment(async_client, auth_headers, post["id"])

    resp = await async_client.put(f"/api/comments/{comment['id']}", json={"content": ""},
                                  headers=auth_headers)
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_update_comment_not_found(async_client: AsyncClient, auth_headers: dict):
    resp = await async_client.put("/api/comments/99999", json={"content": "x"},
                                  headers=auth_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_delete_comment(async_client: AsyncClient, auth_headers: dict):
    post = await create_post(async_client, auth_headers)
    comment = await create_comment(async_client, auth_headers, post["id"])

    resp = await async_client.delete(f"/api/comments/{comment['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Comment deleted successfully."}

    resp = await async_client.get(f"/api/comments/{comment['id']}", headers=auth_headers)
    assert resp.status_code == 404

    detail = (await async_client.get(f"/api/posts/{post['id']}")).json()
    assert detail["commentsCount"] == 0


@pytest.mark.asyncio
async def test_delete_comment_not_found_leaves_storage(
    async_client: AsyncClient, auth_headers: dict, db_session: AsyncSession
):
    post = await create_post(async_client, auth_headers)
    await create_comment(async_client, auth_headers, post["id"])

    resp = await async_client.delete("/api/comments/99999", headers=auth_headers)
    assert resp.status_code == 404

    count = (await db_session.execute(select(func.count()).select_from(Comment))).scalar_one()
    assert count == 1


@pytest.mark.asyncio
async def test_other_user_may_edit_comment_by_default(async_client: AsyncClient, auth_headers: dict):
    post = await create_post(async_client, auth_headers)
    comment = await create_comment(async_client, auth_headers, post["id"])
    other = await register_and_login(async_client, email="other@example.com")

    resp = await async_client.put(f"/api/comments/{comment['id']}", json={"content": "Mine now"},
                                  headers=bearer(other))
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_ownership_enforced_on_comments(
    async_client: AsyncClient, auth_headers: dict, monkeypatch
):
    monkeypatch.setattr(settings, "ENFORCE_OWNERSHIP", True)
    post = await create_post(async_client, auth_headers)
    comment = await create_comment(async_client, auth_headers, post["id"])
    other = await register_and_login(async_client, email="other@example.com")

    resp = await async_client.put(f"/api/comments/{comment['id']}", json={"content": "No"},
                                  headers=bearer(other))
    assert resp.status_code == 403
    resp = await async_client.delete(f"/api/comments/{comment['id']}", headers=bearer(other))
    assert resp.status_code == 403

    resp = await async_client.delete(f"/api/comments/{comment['id']}", headers=auth_headers)
    assert resp.status_code == 200


# ---------------------------------------------------------------------------
# Ids outside the key range
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
@pytest.mark.parametrize("post_id", [2**70, 2**31, 0])
async def test_create_comment_out_of_range_post_id(
    async_client: AsyncClient, auth_headers: dict, db_session: AsyncSession, post_id: int
):
    resp = await async_client.post("/api/comments", json={
        "content": "Nowhere", "post_id": post_id,
    }, headers=auth_headers)
    assert resp.status_code == 422
    assert "post_id" in resp.json()["errors"]

    count = (await db_session.execute(select(func.count()).select_from(Comment))).scalar_one()
    assert count == 0


@pytest.mark.asyncio
async def test_out_of_range_comment_id_is_not_found(async_client: AsyncClient, auth_headers: dict):
    huge = 2**70
    assert (await async_client.get(f"/api/comments/{huge}", headers=auth_headers)).status_code == 404
    resp = await async_client.put(f"/api/comments/{huge}", json={"content": "x"}, headers=auth_headers)
    assert resp.status_code == 404
    assert (await async_client.delete(f"/api/comments/{huge}", headers=auth_headers)).status_code == 404
