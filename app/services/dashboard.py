"""
Admin dashboard summary
"""
from decimal import Decimal
from typing import Any, Dict

from app.models.order import ORDER_STATUSES
from app.storage.base import Storage

RECENT_ORDERS_LIMIT = 5


async def dashboard_summary(storage: Storage) -> Dict[str, Any]:
    products = await storage.list_products()
    users = await storage.list_users()
    orders = await storage.list_orders()

    by_status = {status: 0 for status in ORDER_STATUSES}
    revenue = Decimal("0")
    for order in orders:
        by_status[order.status] = by_status.get(order.status, 0) + 1
        if order.status != "cancelled":
            revenue += Decimal(order.total_amount or 0)

    return {
        "product_count": len(products),
        "user_count": len(users),
        "order_count": len(orders),
        "revenue": revenue.quantize(Decimal("0.01")),
        "orders_by_status": by_status,
        "recent_orders": orders[:RECENT_ORDERS_LIMIT],
    }
