"""
Catalog Entities for E-commerce Domain

Vendors and products as read by the order workflow. Both are owned by the
catalog side of the marketplace; the order workflow never mutates them.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from marketplace.core.domain import Entity

from ..value_objects.vendor import VendorStatus, VendorType


@dataclass
class Vendor(Entity[UUID]):
    """
    Vendor selling through the marketplace.

    The vendor type selects the commission tier; only approved vendors
    may receive orders.
    """

    user_id: UUID | None = None
    business_name: str = ""
    vendor_type: VendorType = VendorType.OTHER
    status: VendorStatus = VendorStatus.PENDING

    def is_approved(self) -> bool:
        return self.status.can_accept_orders()


@dataclass
class Product(Entity[UUID]):
    """
    Product listed by a vendor.

    Carries the per-order constraints checked at checkout: availability,
    the accepted unit price range and the minimum order quantity.
    """

    name: str = ""
    category: str | None = None
    price_min: Decimal = field(default_factory=lambda: Decimal("0"))
    price_max: Decimal = field(default_factory=lambda: Decimal("0"))
    min_order_quantity: int = 1
    is_available: bool = True
    vendor: Vendor | None = None

    @property
    def vendor_id(self) -> UUID | None:
        return self.vendor.id if self.vendor else None

    def accepts_price(self, unit_price: Decimal) -> bool:
        """Check the unit price lies within [price_min, price_max] inclusive."""
        return self.price_min <= unit_price <= self.price_max

    def accepts_quantity(self, quantity: int) -> bool:
        """Check the quantity reaches the minimum order quantity."""
        return quantity >= self.min_order_quantity
