"""
Product review routes
"""
from typing import List

from fastapi import APIRouter, Depends, status

from app.api.deps import get_session_id, require_admin
from app.models.user import User
from app.schemas.review import ReviewCreate, ReviewResponse
from app.services.review_service import ReviewService
from app.storage import Storage, get_storage

router = APIRouter()


@router.get("/{product_id}/reviews", response_model=List[ReviewResponse])
async def list_product_reviews(product_id: int, storage: Storage = Depends(get_storage)):
    return await ReviewService(storage).list_reviews(product_id=product_id)


@router.post("/{product_id}/reviews", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    product_id: int,
    data: ReviewCreate,
    session_id: str = Depends(get_session_id),
    storage: Storage = Depends(get_storage),
):
    return await ReviewService(storage).create_review(product_id, session_id, data)


@router.delete("/{product_id}/reviews/{review_id}")
async def delete_product_review(
    product_id: int,
    review_id: int,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    await ReviewService(storage).delete_review(review_id, product_id=product_id)
    return {"message": "Review deleted"}
