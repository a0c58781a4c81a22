"""
Post service: business logic for posts.

Design notes
------------
- List views attach ``comments_count`` through a correlated COUNT
  subquery, so one SELECT covers every post.
- Detail and per-user views eager-load comments with ``selectinload``
  (relationships are ``lazy="noload"``), and derive the count from the
  loaded collection.
- Service functions flush but do not commit; the transaction boundary
  is owned by the ``get_db`` dependency in the router layer.
"""
import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from blog_api.dependencies import AuthContext
from blog_api.exceptions import NotFoundError
from blog_api.models import Comment, Post, User, isoformat, valid_id
from blog_api.schemas import PostCreate, PostUpdate
from blog_api.services.auth_service import authorize_owner
from blog_api.services.comment_service import comment_to_dict

logger = logging.getLogger(__name__)

_comments_count = (
    select(func.count(Comment.id))
    .where(Comment.post_id == Post.id)
    .correlate(Post)
    .scalar_subquery()
    .label("comments_count")
)


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _post_to_dict(post: Post) -> dict:
    return {
        "id": post.id,
        "title": post.title,
        "content": post.content,
        "user_id": post.user_id,
        "created_at": isoformat(post.created_at),
        "updated_at": isoformat(post.updated_at),
    }


def _post_with_comments_to_dict(post: Post) -> dict:
    data = _post_to_dict(post)
    data["comments_count"] = len(post.comments)
    data["comments"] = [comment_to_dict(c) for c in post.comments]
    return data


async def _get_or_404(db: AsyncSession, post_id: int) -> Post:
    if not valid_id(post_id):
        raise NotFoundError("Post")
    result = await db.execute(select(Post).where(Post.id == post_id))
    post = result.scalar_one_or_none()
    if post is None:
        raise NotFoundError("Post")
    return post


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def get_posts(db: AsyncSession) -> list[dict]:
    """Return every post with its comment count, oldest first."""
    result = await db.execute(select(Post, _comments_count).order_by(Post.id))
    posts = []
    for post, count in result.all():
        data = _post_to_dict(post)
        data["comments_count"] = count
        posts.append(data)
    return posts


async def get_post(db: AsyncSession, post_id: int) -> dict:
    """Return one post with its comments and their count."""
    if not valid_id(post_id):
        raise NotFoundError("Post")
    q = select(Post).where(Post.id == post_id).options(selectinload(Post.comments))
    post = (await db.execute(q)).scalar_one_or_none()
    if post is None:
        raise NotFoundError("Post")
    return _post_with_comments_to_dict(post)


async def create_post(db: AsyncSession, data: PostCreate, auth: AuthContext) -> dict:
    """Create a post owned by the authenticated user."""
    post = Post(title=data.title, content=data.content, user_id=auth.user.id)
    db.add(post)
    await db.flush()
    return _post_to_dict(post)


async def update_post(
    db: AsyncSession,
    post_id: int,
    data: PostUpdate,
    auth: AuthContext | None = None,
) -> dict:
    """
    Apply only the fields present in the request payload
    (``model_dump(exclude_unset=True)``).
    """
    post = await _get_or_404(db, post_id)
    authorize_owner(post.user_id, auth)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(post, field, value)

    await db.flush()
    return _post_to_dict(post)


async def delete_post(
    db: AsyncSession,
    post_id: int,
    auth: AuthContext | None = None,
) -> None:
    """Delete the post and every comment attached to it."""
    post = await _get_or_404(db, post_id)
    authorize_owner(post.user_id, auth)

    await db.execute(delete(Comment).where(Comment.post_id == post_id))
    await db.delete(post)
    await db.flush()
    logger.info("Deleted post id=%s", post_id)


async def get_user_posts(db: AsyncSession, user_id: int) -> list[dict]:
    """Return the posts of *user_id*, each with nested comments and count."""
    if not valid_id(user_id):
        raise NotFoundError("User")
    user = await db.execute(select(User.id).where(User.id == user_id))
    if user.scalar_one_or_none() is None:
        raise NotFoundError("User")

    q = (
        select(Post)
        .where(Post.user_id == user_id)
        .options(selectinload(Post.comments))
        .order_by(Post.id)
    )
    result = await db.execute(q)
    return [_post_with_comments_to_dict(p) for p in result.scalars().all()]
