"""
Admin order routes
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.api.deps import require_admin
from app.models.order import ORDER_STATUSES
from app.models.user import User
from app.schemas.order import OrderDetail, OrderResponse, OrderStatusUpdate
from app.services.order_service import OrderService
from app.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[OrderResponse])
async def list_orders(
    status: Optional[str] = Query(None, pattern="^(" + "|".join(ORDER_STATUSES) + ")$"),
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    """All orders, newest first."""
    return await OrderService(storage).list_orders(status=status)


@router.get("/{order_id}", response_model=OrderDetail)
async def get_order(
    order_id: int,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    order, items = await OrderService(storage).get_order_detail(order_id)
    return OrderDetail.from_order(order, items)


async def _set_status(order_id: int, data: OrderStatusUpdate, admin: User, storage: Storage) -> OrderDetail:
    service = OrderService(storage)
    await service.update_order_status(order_id, data.status)
    logger.info(f"Admin {admin.username} set order {order_id} status to {data.status}")
    order, items = await service.get_order_detail(order_id)
    return OrderDetail.from_order(order, items)


@router.patch("/{order_id}/status", response_model=OrderDetail)
async def update_order_status(
    order_id: int,
    data: OrderStatusUpdate,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    """No transition graph: any status in the set may follow any other."""
    return await _set_status(order_id, data, admin, storage)


@router.patch("/{order_id}", response_model=OrderDetail)
async def update_order(
    order_id: int,
    data: OrderStatusUpdate,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    # Status is the only mutable order field
    return await _set_status(order_id, data, admin, storage)
