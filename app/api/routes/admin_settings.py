"""
Shop settings routes

GET /api/settings is public (storefront header, footer, checkout options);
reading through /admin and replacing the document need an admin session.
"""
import logging

from fastapi import APIRouter, Depends

from app.api.deps import require_admin
from app.models.user import User
from app.schemas.settings import ShopSettings
from app.services.settings_service import get_shop_settings, replace_shop_settings
from app.storage import Storage, get_storage

logger = logging.getLogger(__name__)

public_router = APIRouter()
router = APIRouter()


@public_router.get("", response_model=ShopSettings)
async def public_settings(storage: Storage = Depends(get_storage)):
    return await get_shop_settings(storage)


@router.get("", response_model=ShopSettings)
async def admin_settings(
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    return await get_shop_settings(storage)


@router.put("", response_model=ShopSettings)
async def update_settings(
    data: ShopSettings,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    """Replace the whole settings document; omitted fields reset to defaults."""
    logger.info(f"Admin {admin.username} updating shop settings")
    return await replace_shop_settings(storage, data)
