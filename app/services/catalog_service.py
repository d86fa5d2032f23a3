"""
CatalogService - product CRUD and configuration quotes

Product configuration invariants (unique size ids, fabrics pointing at
existing fabric categories, discount 0-100) are checked on create and
against the merged record on every update.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from app.core.exceptions import NotFoundError, StoreValidationError
from app.models import Product
from app.schemas.product import PriceQuoteRequest, ProductCreate, ProductResponse, ProductUpdate
from app.services.pricing import calculate_unit_price
from app.storage.base import Storage
from app.utils.sanitizer import is_missing, sanitize_boolean, sanitize_integer

logger = logging.getLogger(__name__)

IMPORT_DEFAULT_NAME = "Unknown product"
IMPORT_DEFAULT_DESCRIPTION = "No description"
IMPORT_DEFAULT_CATEGORY = "mattress"


def validate_product(data: Mapping[str, Any]) -> ProductCreate:
    try:
        return ProductCreate.model_validate(data)
    except ValidationError as e:
        raise StoreValidationError(
            "Invalid product",
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e


def import_record_to_product(record: Mapping[str, Any]) -> Dict[str, Any]:
    """Loose import row -> product payload with the import fallbacks applied."""

    def pick(key, fallback):
        value = record.get(key)
        return fallback if is_missing(value) else value

    def pick_list(key, snake_key=None):
        value = record.get(key, record.get(snake_key) if snake_key else None)
        return value if isinstance(value, list) else []

    return {
        "name": pick("name", IMPORT_DEFAULT_NAME),
        "description": pick("description", IMPORT_DEFAULT_DESCRIPTION),
        "category": pick("category", IMPORT_DEFAULT_CATEGORY),
        "base_price": pick("basePrice", record.get("base_price") or "0"),
        "discount": sanitize_integer(record.get("discount"), min_value=0, max_value=100) or 0,
        "images": pick_list("images"),
        "sizes": pick_list("sizes"),
        "fabric_categories": pick_list("fabricCategories", "fabric_categories"),
        "fabrics": pick_list("fabrics"),
        "specifications": pick_list("specifications"),
        "has_lifting_mechanism": sanitize_boolean(record.get("hasLiftingMechanism")) is True,
        "lifting_mechanism_price": pick("liftingMechanismPrice", "0"),
        "featured": sanitize_boolean(record.get("featured")) is True,
        "in_stock": sanitize_boolean(record.get("inStock")) is not False,
    }


class CatalogService:
    """Product operations over the storage port."""

    def __init__(self, storage: Storage):
        self.storage = storage

    async def list_products(self, category: Optional[str] = None) -> List[Product]:
        return await self.storage.list_products(category=category)

    async def get_product(self, product_id: int) -> Product:
        product = await self.storage.get_product(product_id)
        if product is None:
            raise NotFoundError("Product not found", entity="product", entity_id=product_id)
        return product

    async def create_product(self, data: ProductCreate) -> Product:
        product = await self.storage.create_product(data.to_record())
        logger.info(f"Product {product.id} created: {product.name}")
        return product

    async def update_product(self, product_id: int, changes: ProductUpdate) -> Product:
        """Partial update; the merged document must still be a valid product."""
        product = await self.get_product(product_id)
        current = ProductResponse.model_validate(product).model_dump(exclude={"id", "created_at"})
        current.update(changes.model_dump(exclude_unset=True, exclude_none=True))
        merged = validate_product(current)
        updated = await self.storage.update_product(product_id, merged.to_record())
        logger.info(f"Product {product_id} updated")
        return updated

    async def delete_product(self, product_id: int) -> None:
        if not await self.storage.delete_product(product_id):
            raise NotFoundError("Product not found", entity="product", entity_id=product_id)
        logger.info(f"Product {product_id} deleted")

    async def quote(self, product_id: int, request: PriceQuoteRequest) -> Dict[str, Any]:
        product = await self.get_product(product_id)
        unit_price = calculate_unit_price(
            product,
            selected_size=request.selected_size,
            selected_fabric_category=request.selected_fabric_category,
            has_lifting_mechanism=request.has_lifting_mechanism,
            custom_width=request.custom_width,
            custom_length=request.custom_length,
        )
        return {
            "product_id": product.id,
            "unit_price": unit_price,
            "quantity": request.quantity,
            "total": (unit_price * request.quantity).quantize(Decimal("0.01")),
        }

    async def import_products(self, records: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
        imported = 0
        errors = []
        for index, record in enumerate(records):
            try:
                data = validate_product(import_record_to_product(record))
            except StoreValidationError as e:
                errors.append({"row": index + 1, "error": e.message, "details": e.details})
                continue
            await self.storage.create_product(data.to_record())
            imported += 1
        logger.info(f"Product import: {imported} imported, {len(errors)} rejected")
        return {"imported": imported, "failed": len(errors), "errors": errors}
