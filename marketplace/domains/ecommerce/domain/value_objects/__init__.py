"""
E-commerce Value Objects

Immutable domain primitives for the e-commerce domain.
"""

from .order_status import (
    ORDER_STATUS_FLOW,
    VENDOR_SETTABLE_STATUSES,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from .principal import Principal, UserRole
from .vendor import VendorStatus, VendorType

__all__ = [
    "OrderStatus",
    "ORDER_STATUS_FLOW",
    "VENDOR_SETTABLE_STATUSES",
    "PaymentStatus",
    "PaymentMethod",
    "Principal",
    "UserRole",
    "VendorStatus",
    "VendorType",
]
