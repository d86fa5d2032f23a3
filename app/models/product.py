"""
Product model

Sizes, fabric categories, fabrics and specifications are stored as JSON
lists on the product row; they are only ever read and written together
with the product.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, JSON, Numeric

from app.core.database import Base
from app.core.utils import utcnow


# Allowed values for Product.category
PRODUCT_CATEGORIES = ("bed", "mattress", "accessory")


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(500), nullable=False)
    description = Column(Text, default="")
    category = Column(String(50), nullable=False, index=True)

    # Pricing
    base_price = Column(Numeric(10, 2), nullable=False)
    discount = Column(Integer, default=0)  # percent, 0-100

    # Configuration options
    images = Column(JSON, default=list)
    sizes = Column(JSON, default=list)  # [{id, label, priceDelta}]
    fabric_categories = Column(JSON, default=list)  # [{id, name, priceMultiplier}]
    fabrics = Column(JSON, default=list)  # [{id, name, categoryId, thumbnailUrl, imageUrl}]
    specifications = Column(JSON, default=list)  # [{key, value}]

    has_lifting_mechanism = Column(Boolean, default=False)
    lifting_mechanism_price = Column(Numeric(10, 2), default=0)

    featured = Column(Boolean, default=False)
    in_stock = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
