from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.casing import camelize
from blog_api.database import get_db
from blog_api.dependencies import AuthContext, get_optional_auth, require_auth
from blog_api.schemas import PostCreate, PostUpdate
from blog_api.services import post_service

router = APIRouter(prefix="/api/posts", tags=["posts"])

@router.get("")
async def list_posts(db: AsyncSession = Depends(get_db)):
    return camelize(await post_service.get_posts(db))

# Declared before "/{post_id}" so "user" is never parsed as a post id.
@router.get("/user/{user_id}")
async def user_posts(user_id: int, db: AsyncSession = Depends(get_db)):
    return camelize(await post_service.get_user_posts(db, user_id))

@router.get("/{post_id}")
async def get_post(post_id: int, db: AsyncSession = Depends(get_db)):
    return camelize(await post_service.get_post(db, post_id))

@router.post("", status_code=201)
async def create_post(
    data: PostCreate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return camelize(await post_service.create_post(db, data, auth))

@router.put("/{post_id}")
async def update_post(
    post_id: int,
    data: PostUpdate,
    auth: AuthContext | None = Depends(get_optional_auth),
    db: AsyncSession = Depends(get_db),
):
    return camelize(await post_service.update_post(db, post_id, data, auth))

@router.delete("/{post_id}")
async def delete_post(
    post_id: int,
    auth: AuthContext | None = Depends(get_optional_auth),
    db: AsyncSession = Depends(get_db),
):
    await post_service.delete_post(db, post_id, auth)
    return {"message": "Post deleted successfully."}
