"""
Catalog models: vendors and the products they list.

These tables are maintained by the catalog side of the marketplace; the
order workflow only reads them.
"""

import uuid
from typing import TYPE_CHECKING, List

from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .orders import Order


class Vendor(Base, TimestampMixin):
    """Vendedores registrados en el marketplace"""

    __tablename__ = "vendors"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, unique=True, index=True)
    business_name = Column(String(200), nullable=False)
    vendor_type = Column(String(30), nullable=False, default="PHARMACY")  # PHARMACY, LOCAL_MARKET, ...
    status = Column(String(20), nullable=False, default="PENDING")  # PENDING, APPROVED, REJECTED, SUSPENDED
    business_address = Column(Text)
    contact_number = Column(String(20))

    # Relationships
    products: Mapped[List["Product"]] = relationship("Product", back_populates="vendor")
    orders: Mapped[List["Order"]] = relationship("Order", back_populates="vendor")

    __table_args__ = (Index("idx_vendors_status", status),)

    def __repr__(self):
        return f"<Vendor(name='{self.business_name}', type='{self.vendor_type}', status='{self.status}')>"


class Product(Base, TimestampMixin):
    """Productos publicados por un vendedor"""

    __tablename__ = "products"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    vendor_id = Column(Uuid, ForeignKey("vendors.id"), nullable=False)
    name = Column(String(200), nullable=False)
    category = Column(String(50))
    description = Column(Text)

    # Checkout constraints
    price_min = Column(Numeric(12, 2), nullable=False)
    price_max = Column(Numeric(12, 2), nullable=False)
    min_order_quantity = Column(Integer, nullable=False, default=1)
    is_available = Column(Boolean, nullable=False, default=True)

    # Relationships
    vendor: Mapped["Vendor"] = relationship("Vendor", back_populates="products")

    __table_args__ = (
        Index("idx_products_vendor", vendor_id),
        Index("idx_products_available", is_available),
    )

    def __repr__(self):
        return f"<Product(name='{self.name}', available={self.is_available})>"
