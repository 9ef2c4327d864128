from app.models.product import Product
from app.models.order import Order, OrderLineItem

__all__ = ["Product", "Order", "OrderLineItem"]
