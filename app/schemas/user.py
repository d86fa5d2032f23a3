"""
User schemas
"""
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from app.schemas.base import CamelModel


class RegisterRequest(CamelModel):
    username: str = Field(min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class LoginRequest(CamelModel):
    username: str
    password: str


class ProfileUpdate(CamelModel):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class PasswordChange(CamelModel):
    current_password: str
    new_password: str = Field(min_length=6, max_length=128)


class AdminUserCreate(RegisterRequest):
    is_admin: bool = False


class AdminUserUpdate(ProfileUpdate):
    username: Optional[str] = Field(default=None, min_length=3, max_length=100)
    password: Optional[str] = Field(default=None, min_length=6, max_length=128)
    is_admin: Optional[bool] = None


class UserResponse(CamelModel):
    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    is_admin: bool = False
    created_at: Optional[datetime] = None


class SessionInfo(CamelModel):
    session_id: str
    is_logged_in: bool
    is_admin: bool
    user: Optional[UserResponse] = None
