"""
Admin dashboard schema
"""
from decimal import Decimal
from typing import Dict, List

from app.schemas.base import CamelModel
from app.schemas.order import OrderResponse


class DashboardSummary(CamelModel):
    product_count: int
    user_count: int
    order_count: int
    revenue: Decimal
    orders_by_status: Dict[str, int]
    recent_orders: List[OrderResponse]


class ImportResult(CamelModel):
    message: str
    imported: int
    skipped: int = 0
    failed: int = 0
    failed_items: int = 0
    errors: list = []
