from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from blog_api.database import get_db
from blog_api.dependencies import require_user
from blog_api.models import User
from blog_api.schemas import UserCreateRequest, UserLoginRequest, UserUpdateRequest
from blog_api.services import user_service

router = APIRouter(tags=["users"])

@router.post("/users", status_code=201)
async def create_user(data: UserCreateRequest, db: AsyncSession = Depends(get_db)):
    user = await user_service.create_user(db, data.user)
    return user_service.build_user_response(user)

@router.get("/users")
async def list_users(db: AsyncSession = Depends(get_db)):
    return await user_service.get_users(db)

@router.post("/user/login")
async def login(data: UserLoginRequest, db: AsyncSession = Depends(get_db)):
    user = await user_service.login_user(db, data.user)
    return user_service.build_user_response(user)

@router.get("/user")
async def get_current_user(current_user: User = Depends(require_user)):
    return user_service.build_user_response(current_user)

@router.put("/user")
async def update_current_user(
    data: UserUpdateRequest,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    fields = data.user_update_data.model_dump(exclude_unset=True)
    user = await user_service.update_user(db, current_user.id, fields)
    return user_service.build_user_response(user)
