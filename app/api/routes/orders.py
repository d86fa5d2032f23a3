"""
Order routes - checkout and the session's order history
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.api.deps import get_current_user, get_session_id, is_admin_session
from app.core.config import settings
from app.core.rate_limit import get_session_key, limiter
from app.models.user import User
from app.schemas.order import CheckoutResponse, OrderCreate, OrderDetail, OrderResponse
from app.services.order_service import OrderService
from app.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.RATE_LIMIT_CHECKOUT, key_func=get_session_key)
async def checkout(
    request: Request,
    data: OrderCreate,
    session_id: str = Depends(get_session_id),
    storage: Storage = Depends(get_storage),
):
    """
    Place an order from the session cart (or explicit items).

    Missing customer fields are defaulted, never rejected. Items the
    storage refuses are logged and reported in failedItems; the order
    itself always stands once created.
    """
    draft = data.model_dump(exclude={"items"})
    result = await OrderService(storage).checkout(session_id, draft, items=data.items)
    return CheckoutResponse(
        order=OrderDetail.from_order(result.order, result.items),
        message="Order placed",
        failed_items=result.failed_items,
    )


@router.get("", response_model=List[OrderResponse])
async def list_my_orders(
    session_id: str = Depends(get_session_id),
    storage: Storage = Depends(get_storage),
):
    return await OrderService(storage).list_orders(session_id=session_id)


@router.get("/{order_id}", response_model=OrderDetail)
async def get_order(
    order_id: int,
    request: Request,
    session_id: str = Depends(get_session_id),
    user: Optional[User] = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """Visible to the session that placed it and to admins."""
    order, items = await OrderService(storage).get_order_detail(order_id)
    if order.session_id != session_id and not is_admin_session(request, user):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return OrderDetail.from_order(order, items)
