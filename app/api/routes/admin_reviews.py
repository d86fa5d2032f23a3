"""
Admin review moderation
"""
from typing import List

from fastapi import APIRouter, Depends

from app.api.deps import require_admin
from app.models.user import User
from app.schemas.review import ReviewResponse
from app.services.review_service import ReviewService
from app.storage import Storage, get_storage

router = APIRouter()


@router.get("", response_model=List[ReviewResponse])
async def list_reviews(
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    """Reviews across all products, newest first."""
    return await ReviewService(storage).list_reviews()


@router.delete("/{review_id}")
async def delete_review(
    review_id: int,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    await ReviewService(storage).delete_review(review_id)
    return {"message": "Review deleted"}
