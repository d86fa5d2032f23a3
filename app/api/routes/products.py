"""
Product routes

Reads are public; writes need an admin session.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import require_admin
from app.models.product import PRODUCT_CATEGORIES
from app.models.user import User
from app.schemas.product import PriceQuote, PriceQuoteRequest, ProductCreate, ProductResponse, ProductUpdate
from app.services.catalog_service import CatalogService
from app.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[ProductResponse])
async def list_products(
    category: Optional[str] = Query(None, pattern="^(" + "|".join(PRODUCT_CATEGORIES) + ")$"),
    storage: Storage = Depends(get_storage),
):
    return await CatalogService(storage).list_products(category=category)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, storage: Storage = Depends(get_storage)):
    return await CatalogService(storage).get_product(product_id)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    data: ProductCreate,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    logger.info(f"Admin {admin.username} creating product {data.name!r}")
    return await CatalogService(storage).create_product(data)


@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    data: ProductUpdate,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    logger.info(f"Admin {admin.username} updating product {product_id}")
    return await CatalogService(storage).update_product(product_id, data)


@router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    logger.info(f"Admin {admin.username} deleting product {product_id}")
    await CatalogService(storage).delete_product(product_id)
    return {"message": "Product deleted"}


@router.post("/{product_id}/quote", response_model=PriceQuote)
async def quote_product(
    product_id: int,
    configuration: PriceQuoteRequest,
    storage: Storage = Depends(get_storage),
):
    """Price a configuration without touching the cart."""
    return await CatalogService(storage).quote(product_id, configuration)
