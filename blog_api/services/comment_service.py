"""
Comment service: CRUD for comments.

A comment always belongs to an existing post and to the authenticated user
who wrote it. Only ``content`` can change after creation.
"""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.dependencies import AuthContext
from blog_api.exceptions import NotFoundError, ValidationError
from blog_api.models import Comment, Post, isoformat, valid_id
from blog_api.schemas import CommentCreate, CommentUpdate
from blog_api.services.auth_service import authorize_owner

logger = logging.getLogger(__name__)


def comment_to_dict(comment: Comment) -> dict:
    return {
        "id": comment.id,
        "post_id": comment.post_id,
        "content": comment.content,
        "user_id": comment.user_id,
        "created_at": isoformat(comment.created_at),
        "updated_at": isoformat(comment.updated_at),
    }


async def _get_or_404(db: AsyncSession, comment_id: int) -> Comment:
    if not valid_id(comment_id):
        raise NotFoundError("Comment")
    result = await db.execute(select(Comment).where(Comment.id == comment_id))
    comment = result.scalar_one_or_none()
    if comment is None:
        raise NotFoundError("Comment")
    return comment


async def get_comments(db: AsyncSession) -> list[dict]:
    result = await db.execute(select(Comment).order_by(Comment.id))
    return [comment_to_dict(c) for c in result.scalars().all()]


async def get_comment(db: AsyncSession, comment_id: int) -> dict:
    return comment_to_dict(await _get_or_404(db, comment_id))


async def create_comment(db: AsyncSession, data: CommentCreate, auth: AuthContext) -> dict:
    """
    Attach a new comment to ``data.post_id`` on behalf of ``auth.user``.

    A reference to a missing post is a validation failure (422), not a 404:
    the post id is part of the request body.
    """
    post = None
    if valid_id(data.post_id):
        post = (await db.execute(select(Post.id).where(Post.id == data.post_id))).scalar_one_or_none()
    if post is None:
        raise ValidationError({"post_id": ["The selected post id is invalid."]})

    comment = Comment(content=data.content, post_id=data.post_id, user_id=auth.user.id)
    db.add(comment)
    await db.flush()
    return comment_to_dict(comment)


async def update_comment(
    db: AsyncSession,
    comment_id: int,
    data: CommentUpdate,
    auth: AuthContext | None = None,
) -> dict:
    comment = await _get_or_404(db, comment_id)
    authorize_owner(comment.user_id, auth)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(comment, field, value)

    await db.flush()
    return comment_to_dict(comment)


async def delete_comment(
    db: AsyncSession,
    comment_id: int,
    auth: AuthContext | None = None,
) -> None:
    comment = await _get_or_404(db, comment_id)
    authorize_owner(comment.user_id, auth)

    await db.delete(comment)
    await db.flush()
    logger.info("Deleted comment id=%s", comment_id)
