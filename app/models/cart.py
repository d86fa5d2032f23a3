"""
Cart model

Cart lines are scoped by the anonymous session id, not by user.
product_id deliberately carries no foreign key: deleting a product leaves
its cart lines behind, and they are reported as unavailable.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Numeric, Index

from app.core.database import Base
from app.core.utils import utcnow


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(String(255), nullable=False, index=True)
    product_id = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)

    # Configuration
    selected_size = Column(String(50))
    selected_fabric_category = Column(String(50))
    selected_fabric = Column(String(100))
    custom_width = Column(Integer)
    custom_length = Column(Integer)
    has_lifting_mechanism = Column(Boolean, default=False)

    # Unit price snapshot taken on first add
    price = Column(Numeric(10, 2), nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        Index('ix_cart_items_session_product', 'session_id', 'product_id'),
    )
