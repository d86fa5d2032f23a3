"""
UserService - accounts, login and admin user management
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from app.core.config import settings
from app.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from app.core.security import generate_session_token, get_password_hash, verify_password
from app.models import User
from app.schemas.user import AdminUserCreate, AdminUserUpdate, PasswordChange, ProfileUpdate, RegisterRequest
from app.storage.base import Storage
from app.utils.sanitizer import is_missing, sanitize_boolean, sanitize_string

logger = logging.getLogger(__name__)

IMPORT_DEFAULT_PASSWORD = "password123"
PROFILE_FIELDS = ("email", "first_name", "last_name", "phone", "address")


class UserService:
    """User operations over the storage port."""

    def __init__(self, storage: Storage):
        self.storage = storage

    async def _check_unique(self, username: Optional[str], email: Optional[str], user_id: Optional[int] = None):
        if username:
            existing = await self.storage.get_user_by_username(username)
            if existing is not None and existing.id != user_id:
                raise ConflictError("Username already taken", field="username")
        if email:
            existing = await self.storage.get_user_by_email(email)
            if existing is not None and existing.id != user_id:
                raise ConflictError("Email already registered", field="email")

    async def get_user(self, user_id: int) -> User:
        user = await self.storage.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found", entity="user", entity_id=user_id)
        return user

    async def list_users(self) -> List[User]:
        return await self.storage.list_users()

    async def register(self, data: RegisterRequest, is_admin: bool = False) -> User:
        await self._check_unique(data.username, data.email)
        user = await self.storage.create_user({
            "username": data.username,
            "email": data.email,
            "password_hash": get_password_hash(data.password),
            "first_name": data.first_name,
            "last_name": data.last_name,
            "phone": data.phone,
            "address": data.address,
            "is_admin": is_admin,
        })
        logger.info(f"User {user.id} registered: {user.username}")
        return user

    async def authenticate(self, username: str, password: str) -> User:
        user = await self.storage.get_user_by_username(username)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning(f"Failed login for username {username!r}")
            raise UnauthorizedError("Invalid username or password")
        return user

    async def update_profile(self, user_id: int, data: ProfileUpdate) -> User:
        changes = data.model_dump(exclude_unset=True)
        changes = {k: v for k, v in changes.items() if k in PROFILE_FIELDS}
        if changes.get("email"):
            await self._check_unique(None, changes["email"], user_id=user_id)
        elif "email" in changes:
            # email is required on the row
            changes.pop("email")
        user = await self.storage.update_user(user_id, changes)
        if user is None:
            raise NotFoundError("User not found", entity="user", entity_id=user_id)
        return user

    async def change_password(self, user_id: int, data: PasswordChange) -> None:
        user = await self.get_user(user_id)
        if not verify_password(data.current_password, user.password_hash):
            raise UnauthorizedError("Current password is incorrect")
        await self.storage.update_user(user_id, {"password_hash": get_password_hash(data.new_password)})
        logger.info(f"User {user_id} changed password")

    # Admin

    async def admin_create(self, data: AdminUserCreate) -> User:
        return await self.register(data, is_admin=data.is_admin)

    async def admin_update(self, user_id: int, data: AdminUserUpdate) -> User:
        await self.get_user(user_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        await self._check_unique(changes.get("username"), changes.get("email"), user_id=user_id)
        password = changes.pop("password", None)
        if password:
            changes["password_hash"] = get_password_hash(password)
        return await self.storage.update_user(user_id, changes)

    async def admin_delete(self, user_id: int, acting_user_id: Optional[int] = None) -> None:
        if user_id == acting_user_id:
            raise ConflictError("Administrators cannot delete their own account", field="id")
        if not await self.storage.delete_user(user_id):
            raise NotFoundError("User not found", entity="user", entity_id=user_id)
        logger.info(f"User {user_id} deleted by admin {acting_user_id}")

    async def import_users(self, records: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
        """
        Missing usernames, emails and passwords get generated fallbacks.
        Rows clashing with an existing username or email are rejected.
        """
        imported = 0
        errors = []
        for index, record in enumerate(records):
            suffix = generate_session_token()[:8].lower()
            username = sanitize_string(record.get("username")) or f"user_{suffix}"
            email = sanitize_string(record.get("email")) or f"{suffix}@example.com"
            password = record.get("password")
            if is_missing(password):
                password = IMPORT_DEFAULT_PASSWORD
            try:
                await self._check_unique(username, email)
            except ConflictError as e:
                errors.append({"row": index + 1, "error": e.message})
                continue
            await self.storage.create_user({
                "username": username,
                "email": email,
                "password_hash": get_password_hash(str(password)),
                "first_name": sanitize_string(record.get("firstName", record.get("first_name"))),
                "last_name": sanitize_string(record.get("lastName", record.get("last_name"))),
                "phone": sanitize_string(record.get("phone")),
                "address": sanitize_string(record.get("address")),
                "is_admin": sanitize_boolean(record.get("isAdmin", record.get("is_admin"))) is True,
            })
            imported += 1
        logger.info(f"User import: {imported} imported, {len(errors)} rejected")
        return {"imported": imported, "failed": len(errors), "errors": errors}

    async def ensure_admin(self) -> Optional[User]:
        """Create the bootstrap admin when no user with that name exists."""
        if await self.storage.get_user_by_username(settings.ADMIN_USERNAME) is not None:
            return None
        user = await self.storage.create_user({
            "username": settings.ADMIN_USERNAME,
            "email": settings.ADMIN_EMAIL,
            "password_hash": get_password_hash(settings.ADMIN_PASSWORD),
            "is_admin": True,
        })
        logger.info(f"Bootstrap admin '{user.username}' created")
        return user
