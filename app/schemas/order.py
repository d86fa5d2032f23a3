"""
Order schemas

Checkout input is deliberately loose: every order field is optional and
passed through the defaults table rather than rejected.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from app.schemas.base import CamelModel


class OrderCreate(CamelModel):
    session_id: Optional[Any] = None
    customer_name: Optional[Any] = None
    customer_email: Optional[Any] = None
    customer_phone: Optional[Any] = None
    address: Optional[Any] = None
    delivery_method: Optional[Any] = None
    delivery_method_text: Optional[Any] = None
    payment_method: Optional[Any] = None
    payment_method_text: Optional[Any] = None
    comment: Optional[Any] = None
    total_amount: Optional[Any] = None
    # Explicit line items; the session cart is used when omitted
    items: Optional[List[Dict[str, Any]]] = None


class OrderItemResponse(CamelModel):
    id: int
    order_id: int
    product_id: Optional[int] = None
    product_name: str
    quantity: int
    selected_size: str
    custom_width: Optional[int] = None
    custom_length: Optional[int] = None
    selected_fabric_category: str
    selected_fabric: str
    fabric_name: str
    has_lifting_mechanism: bool = False
    price: Decimal


class OrderResponse(CamelModel):
    id: int
    session_id: str
    customer_name: str
    customer_email: str
    customer_phone: str
    address: Optional[str] = ""
    delivery_method: str
    delivery_method_text: str
    delivery_price: Decimal = Decimal("0")
    payment_method: str
    payment_method_text: str
    comment: Optional[str] = ""
    total_amount: Decimal
    status: str
    created_at: Optional[datetime] = None


class OrderDetail(OrderResponse):
    items: List[OrderItemResponse] = []

    @classmethod
    def from_order(cls, order, items) -> "OrderDetail":
        data = OrderResponse.model_validate(order).model_dump()
        data["items"] = [OrderItemResponse.model_validate(item) for item in items]
        return cls(**data)


class CheckoutResponse(CamelModel):
    order: OrderDetail
    message: str
    failed_items: int = 0


class OrderStatusUpdate(CamelModel):
    status: str
