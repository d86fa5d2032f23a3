"""
Cart routes

Every operation is scoped to the caller's session id; lines belonging to
another session behave as if they did not exist.
"""
from typing import List

from fastapi import APIRouter, Depends, status

from app.api.deps import get_session_id
from app.schemas.cart import CartItemCreate, CartItemResponse, CartItemUpdate, CartItemWithProduct, CartSummary
from app.schemas.product import ProductResponse
from app.services.cart_service import CartService
from app.storage import Storage, get_storage

router = APIRouter()


@router.get("", response_model=List[CartItemWithProduct])
async def get_cart(
    session_id: str = Depends(get_session_id),
    storage: Storage = Depends(get_storage),
):
    """Cart lines with live product data; product is null once deleted."""
    lines = await CartService(storage).get_cart_items(session_id)
    return [
        CartItemWithProduct(
            **CartItemResponse.model_validate(item).model_dump(),
            product=ProductResponse.model_validate(product) if product is not None else None,
        )
        for item, product in lines
    ]


@router.get("/summary", response_model=CartSummary)
async def get_cart_summary(
    session_id: str = Depends(get_session_id),
    storage: Storage = Depends(get_storage),
):
    return await CartService(storage).summary(session_id)


@router.post("", response_model=CartItemResponse, status_code=status.HTTP_201_CREATED)
async def add_to_cart(
    data: CartItemCreate,
    session_id: str = Depends(get_session_id),
    storage: Storage = Depends(get_storage),
):
    """Add a configured product; an identical configuration merges into its line."""
    configuration = data.model_dump(exclude={"product_id", "quantity", "price"})
    return await CartService(storage).add_to_cart(
        session_id,
        data.product_id,
        configuration,
        quantity=data.quantity,
        price=data.price,
    )


@router.patch("/{item_id}", response_model=CartItemResponse)
async def update_cart_item(
    item_id: int,
    data: CartItemUpdate,
    session_id: str = Depends(get_session_id),
    storage: Storage = Depends(get_storage),
):
    return await CartService(storage).update_cart_item(
        session_id, item_id, data.model_dump(exclude_unset=True)
    )


@router.delete("/{item_id}")
async def remove_cart_item(
    item_id: int,
    session_id: str = Depends(get_session_id),
    storage: Storage = Depends(get_storage),
):
    await CartService(storage).remove_cart_item(session_id, item_id)
    return {"message": "Item removed"}


@router.delete("")
async def clear_cart(
    session_id: str = Depends(get_session_id),
    storage: Storage = Depends(get_storage),
):
    removed = await CartService(storage).clear_cart(session_id)
    return {"message": "Cart cleared", "removed": removed}
