"""
Product schemas
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, Field, model_validator

from app.schemas.base import CamelModel


class SizeOption(CamelModel):
    id: str
    label: str = ""
    # Older payloads call the delta "price"
    price_delta: float = Field(
        default=0,
        validation_alias=AliasChoices("priceDelta", "price_delta", "price"),
    )


class FabricCategoryOption(CamelModel):
    id: str
    name: str = ""
    price_multiplier: float = Field(
        default=1,
        gt=0,
        validation_alias=AliasChoices("priceMultiplier", "price_multiplier", "multiplier"),
    )


class FabricOption(CamelModel):
    id: str
    name: str = ""
    category_id: str = Field(validation_alias=AliasChoices("categoryId", "category_id", "category"))
    thumbnail_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("thumbnailUrl", "thumbnail_url", "thumbnail"),
    )
    image_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("imageUrl", "image_url", "image"),
    )


class Specification(CamelModel):
    key: str
    value: str


ProductCategory = Literal["bed", "mattress", "accessory"]

# Fields stored as JSON lists of camelCase objects
JSON_LIST_FIELDS = ("sizes", "fabric_categories", "fabrics", "specifications")


class ProductBase(CamelModel):
    name: str = Field(min_length=1, max_length=500)
    description: str = ""
    category: ProductCategory
    base_price: Decimal = Field(ge=0, validation_alias=AliasChoices("basePrice", "base_price", "price"))
    discount: int = Field(default=0, ge=0, le=100)
    images: List[str] = Field(default_factory=list)
    sizes: List[SizeOption] = Field(default_factory=list)
    fabric_categories: List[FabricCategoryOption] = Field(default_factory=list)
    fabrics: List[FabricOption] = Field(default_factory=list)
    specifications: List[Specification] = Field(default_factory=list)
    has_lifting_mechanism: bool = False
    lifting_mechanism_price: Decimal = Field(default=Decimal("0"), ge=0)
    featured: bool = False
    in_stock: bool = True


class ProductCreate(ProductBase):
    """Full product document; also used to re-validate merged updates."""

    @model_validator(mode="after")
    def check_configuration(self):
        size_ids = [s.id for s in self.sizes]
        if len(size_ids) != len(set(size_ids)):
            raise ValueError("Size ids must be unique within a product")

        category_ids = {c.id for c in self.fabric_categories}
        for fabric in self.fabrics:
            if fabric.category_id not in category_ids:
                raise ValueError(
                    f"Fabric '{fabric.id}' references unknown fabric category '{fabric.category_id}'"
                )
        return self

    def to_record(self) -> Dict[str, Any]:
        """Column values for storage; nested options as JSON-ready dicts."""
        record = self.model_dump(exclude=set(JSON_LIST_FIELDS))
        for field in JSON_LIST_FIELDS:
            record[field] = [
                item.model_dump(mode="json", by_alias=True) for item in getattr(self, field)
            ]
        return record


class ProductUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=500)
    description: Optional[str] = None
    category: Optional[ProductCategory] = None
    base_price: Optional[Decimal] = Field(
        default=None, ge=0, validation_alias=AliasChoices("basePrice", "base_price", "price")
    )
    discount: Optional[int] = Field(default=None, ge=0, le=100)
    images: Optional[List[str]] = None
    sizes: Optional[List[SizeOption]] = None
    fabric_categories: Optional[List[FabricCategoryOption]] = None
    fabrics: Optional[List[FabricOption]] = None
    specifications: Optional[List[Specification]] = None
    has_lifting_mechanism: Optional[bool] = None
    lifting_mechanism_price: Optional[Decimal] = Field(default=None, ge=0)
    featured: Optional[bool] = None
    in_stock: Optional[bool] = None


class ProductResponse(ProductBase):
    id: int
    created_at: Optional[datetime] = None


class PriceQuoteRequest(CamelModel):
    selected_size: Optional[str] = None
    selected_fabric_category: Optional[str] = None
    selected_fabric: Optional[str] = None
    custom_width: Optional[int] = Field(default=None, gt=0)
    custom_length: Optional[int] = Field(default=None, gt=0)
    has_lifting_mechanism: Any = False
    quantity: int = Field(default=1, ge=1)


class PriceQuote(CamelModel):
    product_id: int
    unit_price: Decimal
    quantity: int
    total: Decimal
