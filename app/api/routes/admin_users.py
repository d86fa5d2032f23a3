"""
Admin User Management Routes
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, status

from app.api.deps import require_admin
from app.models.user import User
from app.schemas.user import AdminUserCreate, AdminUserUpdate, UserResponse
from app.services.user_service import UserService
from app.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[UserResponse])
async def list_users(
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    return await UserService(storage).list_users()


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    return await UserService(storage).get_user(user_id)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: AdminUserCreate,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    user = await UserService(storage).admin_create(data)
    logger.info(f"Admin {admin.username} created user {user.id} (admin={user.is_admin})")
    return user


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    data: AdminUserUpdate,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    user = await UserService(storage).admin_update(user_id, data)
    logger.info(f"Admin {admin.username} updated user {user_id}")
    return user


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    await UserService(storage).admin_delete(user_id, acting_user_id=admin.id)
    return {"message": "User deleted"}
