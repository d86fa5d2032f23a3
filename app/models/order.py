"""
Order models

Orders are keyed by the browser session id. Items carry denormalized
snapshots (product_name, fabric_name) so history survives product deletion;
the product FK is nulled on delete.
"""
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime, Text, Numeric, Index

from app.core.database import Base
from app.core.utils import utcnow


# Fixed status set; no transition graph is enforced
ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "completed", "cancelled")


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(String(255), nullable=False, index=True)

    # Customer
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(50), nullable=False)
    address = Column(Text, default="")

    # Delivery / payment
    delivery_method = Column(String(50), nullable=False)
    delivery_method_text = Column(String(100), nullable=False)
    delivery_price = Column(Numeric(10, 2), default=0)
    payment_method = Column(String(50), nullable=False)
    payment_method_text = Column(String(100), nullable=False)

    comment = Column(Text, default="")
    total_amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), default="pending", index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True)

    # Snapshot of product at time of order
    product_name = Column(String(500), nullable=False)
    quantity = Column(Integer, nullable=False)
    selected_size = Column(String(50), nullable=False)
    custom_width = Column(Integer)
    custom_length = Column(Integer)
    selected_fabric_category = Column(String(50), nullable=False)
    selected_fabric = Column(String(100), nullable=False)
    fabric_name = Column(String(255), nullable=False)
    has_lifting_mechanism = Column(Boolean, default=False)
    price = Column(Numeric(10, 2), nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        Index('ix_order_items_order_product', 'order_id', 'product_id'),
    )
