"""
E-commerce API Schemas

Pydantic schemas for API request/response validation. Field names travel
in camelCase on the wire.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from marketplace.domains.ecommerce.domain.entities import Order, OrderLine, Payment
from marketplace.domains.ecommerce.domain.value_objects import OrderStatus, PaymentMethod

# Decimals are kept exact internally and rendered as JSON numbers
MoneyAmount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """Base schema accepting camelCase or snake_case input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Requests


class OrderItemRequest(CamelModel):
    """Order item request schema."""

    product_id: UUID
    quantity: int = Field(..., ge=1)
    unit_price: Decimal = Field(..., ge=Decimal("0.01"), decimal_places=2)
    requires_delivery: bool = False
    delivery_address: str | None = Field(default=None, max_length=500)


class CreateOrderRequest(CamelModel):
    """Create order request schema."""

    items: list[OrderItemRequest] = Field(..., min_length=1)
    total_amount: Decimal = Field(..., ge=Decimal("0.01"), decimal_places=2)
    payment_method: PaymentMethod = PaymentMethod.RAZORPAY


class UpdateOrderStatusRequest(CamelModel):
    """Vendor status change request schema."""

    status: OrderStatus
    notes: str | None = Field(default=None, max_length=500)


class VerifyPaymentRequest(CamelModel):
    """Checkout payment verification request schema."""

    gateway_order_id: str = Field(..., min_length=1)
    gateway_payment_id: str = Field(..., min_length=1)
    signature: str = Field(..., min_length=1)


# Responses


class OrderLineResponse(CamelModel):
    """Order line response schema."""

    id: UUID | None
    product_id: UUID | None
    product_name: str
    quantity: int
    unit_price: MoneyAmount
    total_amount: MoneyAmount
    requires_delivery: bool
    delivery_address: str | None = None
    status: OrderStatus

    @classmethod
    def from_entity(cls, line: OrderLine) -> "OrderLineResponse":
        return cls(
            id=line.id,
            product_id=line.product_id,
            product_name=line.product_name,
            quantity=line.quantity,
            unit_price=line.unit_price,
            total_amount=line.total_amount,
            requires_delivery=line.requires_delivery,
            delivery_address=line.delivery_address,
            status=line.status,
        )


class PaymentResponse(CamelModel):
    """Payment sub-object response schema."""

    id: UUID | None
    status: str
    payment_method: str
    total_amount: MoneyAmount
    commission_amount: MoneyAmount
    vendor_amount: MoneyAmount
    gateway_order_id: str | None = None
    gateway_payment_id: str | None = None
    processed_at: datetime | None = None
    refund_id: str | None = None
    refund_amount: MoneyAmount | None = None

    @classmethod
    def from_entity(cls, payment: Payment) -> "PaymentResponse":
        return cls(
            id=payment.id,
            status=payment.status.value,
            payment_method=payment.payment_method.value,
            total_amount=payment.total_amount,
            commission_amount=payment.commission_amount,
            vendor_amount=payment.vendor_amount,
            gateway_order_id=payment.gateway_order_id,
            gateway_payment_id=payment.gateway_payment_id,
            processed_at=payment.processed_at,
            refund_id=payment.refund_id,
            refund_amount=payment.refund_amount,
        )


class OrderResponse(CamelModel):
    """Order detail response schema."""

    id: UUID | None
    order_number: str | None
    customer_id: UUID | None
    vendor_id: UUID | None
    status: str
    total_amount: MoneyAmount
    commission_amount: MoneyAmount
    vendor_amount: MoneyAmount
    item_count: int
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
    items: list[OrderLineResponse]
    payment: PaymentResponse | None = None

    @classmethod
    def from_entity(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            order_number=order.order_number,
            customer_id=order.customer_id,
            vendor_id=order.vendor_id,
            status=order.status.value,
            total_amount=order.total_amount,
            commission_amount=order.commission_amount,
            vendor_amount=order.vendor_amount,
            item_count=order.item_count,
            notes=order.notes,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[OrderLineResponse.from_entity(line) for line in order.lines],
            payment=PaymentResponse.from_entity(order.payment) if order.payment else None,
        )


def serialize_order(order: Order) -> dict:
    """Render an order as the camelCase JSON payload used in envelopes."""
    return OrderResponse.from_entity(order).model_dump(mode="json", by_alias=True)


__all__ = [
    "MoneyAmount",
    "OrderItemRequest",
    "CreateOrderRequest",
    "UpdateOrderStatusRequest",
    "VerifyPaymentRequest",
    "OrderLineResponse",
    "PaymentResponse",
    "OrderResponse",
    "serialize_order",
]
