"""
Cart schemas
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import Field

from app.schemas.base import CamelModel
from app.schemas.product import ProductResponse


class CartItemCreate(CamelModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)
    selected_size: Optional[str] = None
    selected_fabric_category: Optional[str] = None
    selected_fabric: Optional[str] = None
    custom_width: Optional[int] = Field(default=None, gt=0)
    custom_length: Optional[int] = Field(default=None, gt=0)
    # Raw flag; browsers send true/"true"/"on"/nothing
    has_lifting_mechanism: Any = False
    # Unit price snapshot; computed from the catalog when omitted
    price: Optional[Decimal] = Field(default=None, ge=0)


class CartItemUpdate(CamelModel):
    quantity: Optional[int] = None
    selected_size: Optional[str] = None
    selected_fabric_category: Optional[str] = None
    selected_fabric: Optional[str] = None
    custom_width: Optional[int] = Field(default=None, gt=0)
    custom_length: Optional[int] = Field(default=None, gt=0)
    has_lifting_mechanism: Any = None
    price: Optional[Decimal] = Field(default=None, ge=0)


class CartItemResponse(CamelModel):
    id: int
    session_id: str
    product_id: int
    quantity: int
    selected_size: Optional[str] = None
    selected_fabric_category: Optional[str] = None
    selected_fabric: Optional[str] = None
    custom_width: Optional[int] = None
    custom_length: Optional[int] = None
    has_lifting_mechanism: bool = False
    price: Decimal
    created_at: Optional[datetime] = None


class CartItemWithProduct(CartItemResponse):
    # None when the product was deleted after the line was added
    product: Optional[ProductResponse] = None


class CartSummary(CamelModel):
    item_count: int
    subtotal: Decimal
    unavailable_count: int = 0
