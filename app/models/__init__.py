from app.models.user import User
from app.models.product import Product, PRODUCT_CATEGORIES
from app.models.cart import CartItem
from app.models.order import Order, OrderItem, ORDER_STATUSES
from app.models.review import Review
from app.models.site_settings import SiteSetting

__all__ = [
    "User",
    "Product",
    "PRODUCT_CATEGORIES",
    "CartItem",
    "Order",
    "OrderItem",
    "ORDER_STATUSES",
    "Review",
    "SiteSetting",
]
