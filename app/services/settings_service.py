"""
Shop settings

Stored values are merged over the defaults from ShopSettings, so a fresh
install serves a complete document.
"""
import logging
from typing import Any, Dict

from app.schemas.settings import ShopSettings
from app.storage.base import Storage

logger = logging.getLogger(__name__)


async def get_shop_settings(storage: Storage) -> ShopSettings:
    stored = await storage.get_settings()
    known = {k: v for k, v in stored.items() if k in ShopSettings.model_fields}
    return ShopSettings.model_validate({**ShopSettings().model_dump(), **known})


async def replace_shop_settings(storage: Storage, values: ShopSettings) -> ShopSettings:
    # Persisted with snake_case keys; JSON-mode keeps Decimals encodable
    payload: Dict[str, Any] = values.model_dump(mode="json")
    await storage.save_settings(payload)
    logger.info("Shop settings updated")
    return await get_shop_settings(storage)
