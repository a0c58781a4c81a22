"""Shared HTTP helpers for the endpoint tests."""
from httpx import AsyncClient


async def register_and_login(
    client: AsyncClient,
    email: str = "al@example.com",
    password: str = "12345678",
    name: str = "Al",
) -> str:
    """Register an account, log in, and return the bearer token."""
    resp = await client.post("/api/register", json={
        "name": name, "email": email, "password": password,
    })
    assert resp.status_code == 201, resp.text
    resp = await client.post("/api/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def create_post(client: AsyncClient, headers: dict, title: str = "Post Title",
                      content: str = "This is the content of the post.") -> dict:
    resp = await client.post("/api/posts", json={"title": title, "content": content}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def create_comment(client: AsyncClient, headers: dict, post_id: int,
                         content: str = "This is a comment.") -> dict:
    resp = await client.post("/api/comments", json={"content": content, "post_id": post_id},
                             headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()
