"""
Database models package - Organized by responsibility
"""

from .base import Base, TimestampMixin
from .catalog import Product, Vendor
from .orders import Order, OrderItem, Payment

__all__ = [
    "Base",
    "TimestampMixin",
    "Vendor",
    "Product",
    "Order",
    "OrderItem",
    "Payment",
]
