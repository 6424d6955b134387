"""
Order Entity for E-commerce Domain

An order is placed by one customer against exactly one vendor. It owns its
lines and its payment record; the three are born together and the lines
always carry the order's status.
"""

import random
import string
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from uuid import UUID

from marketplace.core.domain import (
    AggregateRoot,
    BusinessRuleViolationException,
    Entity,
    InvalidStateTransitionException,
    round_money,
)

from ..value_objects.order_status import OrderStatus, PaymentMethod, PaymentStatus
from ..value_objects.principal import Principal

_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def generate_order_number() -> str:
    """Human-readable order number, e.g. ORD-LZ3K8Q1A-4F9XQ2."""
    timestamp = _to_base36(int(time.time() * 1000))
    suffix = "".join(random.choices(_BASE36, k=6))
    return f"ORD-{timestamp}-{suffix}".upper()


@dataclass
class OrderLine(Entity[UUID]):
    """
    One product line within an order.

    The line total is computed from quantity and unit price at placement time.
    """

    order_id: UUID | None = None
    product_id: UUID | None = None
    product_name: str = ""
    quantity: int = 1
    unit_price: Decimal = field(default_factory=lambda: Decimal("0"))
    total_amount: Decimal = field(default_factory=lambda: Decimal("0"))
    requires_delivery: bool = False
    delivery_address: str | None = None
    status: OrderStatus = OrderStatus.PENDING

    @classmethod
    def create(
        cls,
        product_id: UUID,
        product_name: str,
        quantity: int,
        unit_price: Decimal,
        requires_delivery: bool = False,
        delivery_address: str | None = None,
    ) -> "OrderLine":
        unit_price = round_money(unit_price)
        return cls(
            product_id=product_id,
            product_name=product_name,
            quantity=quantity,
            unit_price=unit_price,
            total_amount=round_money(unit_price * quantity),
            requires_delivery=requires_delivery,
            delivery_address=delivery_address,
        )


@dataclass
class Payment(Entity[UUID]):
    """
    Payment record of an order (1:1).

    Tracks the commission split and the gateway identifiers as the
    settlement progresses.
    """

    order_id: UUID | None = None
    total_amount: Decimal = field(default_factory=lambda: Decimal("0"))
    commission_amount: Decimal = field(default_factory=lambda: Decimal("0"))
    vendor_amount: Decimal = field(default_factory=lambda: Decimal("0"))
    payment_method: PaymentMethod = PaymentMethod.RAZORPAY
    status: PaymentStatus = PaymentStatus.PENDING
    transaction_id: str | None = None
    gateway_order_id: str | None = None
    gateway_payment_id: str | None = None
    gateway_signature: str | None = None
    processed_at: datetime | None = None
    refund_id: str | None = None
    refund_amount: Decimal | None = None
    failure_reason: str | None = None

    def mark_success(self, gateway_payment_id: str, signature: str | None = None) -> None:
        """Record a captured payment."""
        self.status = PaymentStatus.SUCCESS
        self.gateway_payment_id = gateway_payment_id
        self.transaction_id = gateway_payment_id
        if signature:
            self.gateway_signature = signature
        self.processed_at = datetime.now(UTC)
        self.touch()

    def mark_failed(self, reason: str | None = None) -> None:
        """Record a failed payment."""
        self.status = PaymentStatus.FAILED
        self.failure_reason = reason
        self.processed_at = datetime.now(UTC)
        self.touch()

    def mark_refunded(self, refund_id: str, amount: Decimal) -> None:
        """Record a refund initiated through the gateway."""
        self.status = PaymentStatus.REFUNDED
        self.refund_id = refund_id
        self.refund_amount = round_money(amount)
        self.processed_at = datetime.now(UTC)
        self.touch()

    def is_refundable(self) -> bool:
        """A refund needs a captured payment with a gateway payment id."""
        return self.status.is_successful() and bool(self.gateway_payment_id)


@dataclass
class Order(AggregateRoot[UUID]):
    """
    Order aggregate root for the marketplace.

    Example:
        ```python
        order = Order.place(
            customer_id=customer_id,
            vendor_id=vendor.id,
            lines=[OrderLine.create(product.id, product.name, 2, Decimal("100"))],
            commission_amount=Decimal("32.00"),
        )
        order.transition_to(OrderStatus.CONFIRMED)
        ```
    """

    order_number: str | None = None
    customer_id: UUID | None = None
    vendor_id: UUID | None = None
    vendor_user_id: UUID | None = None
    total_amount: Decimal = field(default_factory=lambda: Decimal("0"))
    commission_amount: Decimal = field(default_factory=lambda: Decimal("0"))
    status: OrderStatus = OrderStatus.PENDING
    lines: list[OrderLine] = field(default_factory=list)
    payment: Payment | None = None
    notes: str | None = None

    # Factory

    @classmethod
    def place(
        cls,
        customer_id: UUID,
        vendor_id: UUID,
        lines: list[OrderLine],
        commission_amount: Decimal,
        payment_method: PaymentMethod = PaymentMethod.RAZORPAY,
        vendor_user_id: UUID | None = None,
    ) -> "Order":
        """
        Build a new PENDING order with its PENDING payment record.

        The order total is the exact sum of the line totals; the vendor's
        net amount is whatever remains after the commission.
        """
        if not lines:
            raise BusinessRuleViolationException(
                rule="ORDER_HAS_ITEMS",
                message="Order must contain at least one item",
            )

        total = round_money(sum((line.total_amount for line in lines), Decimal("0")))
        commission = round_money(commission_amount)
        for line in lines:
            line.status = OrderStatus.PENDING

        return cls(
            order_number=generate_order_number(),
            customer_id=customer_id,
            vendor_id=vendor_id,
            vendor_user_id=vendor_user_id,
            total_amount=total,
            commission_amount=commission,
            status=OrderStatus.PENDING,
            lines=lines,
            payment=Payment(
                total_amount=total,
                commission_amount=commission,
                vendor_amount=total - commission,
                payment_method=payment_method,
                status=PaymentStatus.PENDING,
            ),
        )

    # Status Transitions

    def transition_to(self, new_status: OrderStatus) -> None:
        """
        Move the order and all of its lines to a new status.

        Raises:
            InvalidStateTransitionException: If the current status is terminal
                or the move is not in the transition table
        """
        if self.status.is_terminal():
            raise InvalidStateTransitionException(
                current_state=self.status.value,
                target_state=new_status.value,
                message="Cannot update completed or cancelled orders",
            )

        if not self.status.can_transition_to(new_status):
            raise InvalidStateTransitionException(
                current_state=self.status.value,
                target_state=new_status.value,
            )

        self.status = new_status
        for line in self.lines:
            line.status = new_status
            line.touch()
        self.increment_version()
        self.touch()

    def cancel(self) -> None:
        """
        Cancel the order on behalf of its customer.

        Raises:
            BusinessRuleViolationException: If already completed or cancelled
        """
        if self.status is OrderStatus.COMPLETED:
            raise BusinessRuleViolationException(
                rule="ORDER_ALREADY_COMPLETED",
                message="Cannot cancel completed orders",
                details={"order_id": str(self.id)},
            )
        if self.status is OrderStatus.CANCELLED:
            raise BusinessRuleViolationException(
                rule="ORDER_ALREADY_CANCELLED",
                message="Order is already cancelled",
                details={"order_id": str(self.id)},
            )
        self.transition_to(OrderStatus.CANCELLED)

    # Ownership

    def is_owned_by_customer(self, customer_id: UUID | None) -> bool:
        return customer_id is not None and self.customer_id == customer_id

    def is_owned_by_vendor(self, vendor_id: UUID | None) -> bool:
        return vendor_id is not None and self.vendor_id == vendor_id

    def is_visible_to(self, principal: Principal) -> bool:
        """Customers see their orders, vendors the orders placed with them, admins everything."""
        if principal.is_admin:
            return True
        if principal.is_customer:
            return self.is_owned_by_customer(principal.user_id)
        if principal.is_vendor:
            return self.is_owned_by_vendor(principal.vendor_id)
        return False

    # Helpers

    @property
    def vendor_amount(self) -> Decimal:
        return self.total_amount - self.commission_amount

    @property
    def item_count(self) -> int:
        """Total number of units (sum of quantities)."""
        return sum(line.quantity for line in self.lines)
