"""
E-commerce Domain Entities
"""

from .order import Order, OrderLine, Payment, generate_order_number
from .product import Product, Vendor

__all__ = [
    "Order",
    "OrderLine",
    "Payment",
    "Product",
    "Vendor",
    "generate_order_number",
]
