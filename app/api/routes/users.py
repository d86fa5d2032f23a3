"""
User profile routes
"""
from fastapi import APIRouter, Depends

from app.api.deps import require_user
from app.models.user import User
from app.schemas.user import PasswordChange, ProfileUpdate, UserResponse
from app.services.user_service import UserService
from app.storage import Storage, get_storage

router = APIRouter()


@router.get("/profile", response_model=UserResponse)
async def get_profile(user: User = Depends(require_user)):
    return user


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    data: ProfileUpdate,
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
):
    return await UserService(storage).update_profile(user.id, data)


@router.put("/password")
async def change_password(
    data: PasswordChange,
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
):
    await UserService(storage).change_password(user.id, data)
    return {"message": "Password updated"}
