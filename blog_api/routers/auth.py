from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.casing import camelize
from blog_api.database import get_db
from blog_api.dependencies import AuthContext, require_auth
from blog_api.schemas import LoginRequest
from blog_api.services import auth_service

router = APIRouter(prefix="/api", tags=["auth"])

@router.post("/register", status_code=201)
async def register(payload: dict = Body(...), db: AsyncSession = Depends(get_db)):
    # Validated in the service so the unique-email rule reports with the rest.
    data = await auth_service.validate_registration(db, payload)
    await auth_service.register_user(db, data)
    return {"message": "User registered successfully."}

@router.post("/login")
async def login(data: LoginRequest, db: AsyncSession = Depends(get_db)):
    return camelize(await auth_service.login(db, data))

@router.post("/logout")
async def logout(
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await auth_service.logout(db, auth)
    return {"message": "Logout successful"}
