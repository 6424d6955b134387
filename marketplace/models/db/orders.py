"""
Order management models
"""

import uuid
from typing import TYPE_CHECKING, List

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .catalog import Product, Vendor


class Order(Base, TimestampMixin):
    """Órdenes de compra (un único vendedor por orden)"""

    __tablename__ = "orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_number = Column(String(50), unique=True, nullable=False, index=True)
    customer_id = Column(Uuid, nullable=False)
    vendor_id = Column(Uuid, ForeignKey("vendors.id"), nullable=False)

    # Order details
    status = Column(String(20), nullable=False, default="PENDING")  # DRAFT, PENDING, CONFIRMED, COMPLETED, CANCELLED
    total_amount = Column(Numeric(12, 2), nullable=False)
    commission_amount = Column(Numeric(12, 2), nullable=False)
    notes = Column(Text)

    # Relationships
    vendor: Mapped["Vendor"] = relationship("Vendor", back_populates="orders")
    items: Mapped[List["OrderItem"]] = relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan", order_by="OrderItem.position"
    )
    payment: Mapped["Payment"] = relationship(
        "Payment", back_populates="order", uselist=False, cascade="all, delete-orphan"
    )

    # Índices
    __table_args__ = (
        Index("idx_orders_customer", customer_id),
        Index("idx_orders_vendor", vendor_id),
        Index("idx_orders_status", status),
        Index("idx_orders_customer_created", customer_id, "created_at"),
        Index("idx_orders_vendor_created", vendor_id, "created_at"),
    )

    def __repr__(self):
        return f"<Order(number='{self.order_number}', status='{self.status}', total={self.total_amount})>"


class OrderItem(Base, TimestampMixin):
    """Líneas de una orden"""

    __tablename__ = "order_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id = Column(Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Uuid, ForeignKey("products.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    product_name = Column(String(200), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)
    requires_delivery = Column(Boolean, nullable=False, default=False)
    delivery_address = Column(String(500))
    status = Column(String(20), nullable=False, default="PENDING")

    # Relationships
    order: Mapped["Order"] = relationship("Order", back_populates="items")
    product: Mapped["Product"] = relationship("Product")

    __table_args__ = (Index("idx_order_items_order", order_id),)

    def __repr__(self):
        return f"<OrderItem(product='{self.product_name}', quantity={self.quantity}, status='{self.status}')>"


class Payment(Base, TimestampMixin):
    """Pago asociado a una orden (1:1)"""

    __tablename__ = "payments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id = Column(Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, unique=True)

    # Commission split
    total_amount = Column(Numeric(12, 2), nullable=False)
    commission_amount = Column(Numeric(12, 2), nullable=False)
    vendor_amount = Column(Numeric(12, 2), nullable=False)

    payment_method = Column(String(30), nullable=False, default="RAZORPAY")
    payment_status = Column(String(20), nullable=False, default="PENDING")  # PENDING, SUCCESS, FAILED, REFUNDED
    transaction_id = Column(String(100))
    failure_reason = Column(Text)

    # Gateway references
    gateway_order_id = Column(String(100), unique=True)
    gateway_payment_id = Column(String(100))
    gateway_signature = Column(String(256))
    processed_at = Column(DateTime(timezone=True))

    # Refunds
    refund_id = Column(String(100), unique=True)
    refund_amount = Column(Numeric(12, 2))

    # Relationships
    order: Mapped["Order"] = relationship("Order", back_populates="payment")

    __table_args__ = (Index("idx_payments_status", payment_status),)

    def __repr__(self):
        return f"<Payment(order_id='{self.order_id}', status='{self.payment_status}', total={self.total_amount})>"
