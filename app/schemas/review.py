"""
Review schemas
"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.base import CamelModel


class ReviewCreate(CamelModel):
    customer_name: str = Field(min_length=1, max_length=255)
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=1)


class ReviewResponse(CamelModel):
    id: int
    product_id: int
    customer_name: str
    rating: int
    comment: str
    created_at: Optional[datetime] = None
