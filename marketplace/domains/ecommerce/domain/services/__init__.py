"""
E-commerce Domain Services

Domain services that encapsulate business logic
that doesn't belong to a single entity.
"""

from marketplace.domains.ecommerce.domain.services.catalog_validator import (
    TOTAL_TOLERANCE,
    CartItem,
    CatalogValidator,
    ValidatedCart,
)
from marketplace.domains.ecommerce.domain.services.commission_service import (
    COMMISSION_RATES,
    DEFAULT_COMMISSION_RATE,
    CommissionBreakdown,
    CommissionService,
)

__all__ = [
    "CatalogValidator",
    "CartItem",
    "ValidatedCart",
    "TOTAL_TOLERANCE",
    "CommissionService",
    "CommissionBreakdown",
    "COMMISSION_RATES",
    "DEFAULT_COMMISSION_RATE",
]
