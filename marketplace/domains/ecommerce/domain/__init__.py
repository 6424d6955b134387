"""
E-commerce Domain Layer

Domain-Driven Design implementation for the marketplace ordering context.

This module contains:
- Entities: Business objects with identity (Order, OrderLine, Payment, Product, Vendor)
- Value Objects: Immutable domain primitives (OrderStatus, PaymentStatus, VendorType, Principal)
- Domain Services: Commission split and catalog validation
"""

from marketplace.domains.ecommerce.domain.entities import (
    Order,
    OrderLine,
    Payment,
    Product,
    Vendor,
)
from marketplace.domains.ecommerce.domain.services import (
    CartItem,
    CatalogValidator,
    CommissionBreakdown,
    CommissionService,
    ValidatedCart,
)
from marketplace.domains.ecommerce.domain.value_objects import (
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    Principal,
    UserRole,
    VendorStatus,
    VendorType,
)

__all__ = [
    # Entities
    "Order",
    "OrderLine",
    "Payment",
    "Product",
    "Vendor",
    # Services
    "CatalogValidator",
    "CartItem",
    "ValidatedCart",
    "CommissionService",
    "CommissionBreakdown",
    # Value Objects
    "OrderStatus",
    "PaymentStatus",
    "PaymentMethod",
    "Principal",
    "UserRole",
    "VendorStatus",
    "VendorType",
]
