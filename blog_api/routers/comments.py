from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.casing import camelize
from blog_api.database import get_db
from blog_api.dependencies import AuthContext, require_auth
from blog_api.schemas import CommentCreate, CommentUpdate
from blog_api.services import comment_service

# Every comment route requires a bearer token.
router = APIRouter(
    prefix="/api/comments",
    tags=["comments"],
    dependencies=[Depends(require_auth)],
)

@router.get("")
async def list_comments(db: AsyncSession = Depends(get_db)):
    return camelize(await comment_service.get_comments(db))

@router.get("/{comment_id}")
async def get_comment(comment_id: int, db: AsyncSession = Depends(get_db)):
    return camelize(await comment_service.get_comment(db, comment_id))

@router.post("", status_code=201)
async def create_comment(
    data: CommentCreate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return camelize(await comment_service.create_comment(db, data, auth))

@router.put("/{comment_id}")
async def update_comment(
    comment_id: int,
    data: CommentUpdate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return camelize(await comment_service.update_comment(db, comment_id, data, auth))

@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: int,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await comment_service.delete_comment(db, comment_id, auth)
    return {"message": "Comment deleted successfully."}
