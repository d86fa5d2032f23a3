"""
Product reviews
"""
import logging
from typing import List, Optional

from app.core.exceptions import NotFoundError
from app.models import Review
from app.schemas.review import ReviewCreate
from app.storage.base import Storage

logger = logging.getLogger(__name__)


class ReviewService:

    def __init__(self, storage: Storage):
        self.storage = storage

    async def list_reviews(self, product_id: Optional[int] = None) -> List[Review]:
        return await self.storage.list_reviews(product_id=product_id)

    async def create_review(self, product_id: int, session_id: str, data: ReviewCreate) -> Review:
        if await self.storage.get_product(product_id) is None:
            raise NotFoundError("Product not found", entity="product", entity_id=product_id)
        return await self.storage.create_review({
            "product_id": product_id,
            "session_id": session_id,
            "customer_name": data.customer_name.strip(),
            "rating": data.rating,
            "comment": data.comment.strip(),
        })

    async def delete_review(self, review_id: int, product_id: Optional[int] = None) -> None:
        review = await self.storage.get_review(review_id)
        if review is None or (product_id is not None and review.product_id != product_id):
            raise NotFoundError("Review not found", entity="review", entity_id=review_id)
        await self.storage.delete_review(review_id)
        logger.info(f"Review {review_id} deleted")
