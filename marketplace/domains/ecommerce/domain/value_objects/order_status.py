"""
Order Status Value Object for E-commerce Domain

Represents the lifecycle states of an order with transition rules.
"""

from marketplace.core.domain import StatusEnum


class OrderStatus(StatusEnum):
    """
    Order lifecycle states.

    Valid transitions:
    - DRAFT -> PENDING, CANCELLED
    - PENDING -> CONFIRMED, CANCELLED
    - CONFIRMED -> COMPLETED, CANCELLED
    - CANCELLED, COMPLETED -> (terminal states)

    Order lines carry the same status as their parent order.
    """

    DRAFT = "DRAFT"
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    def can_transition_to(self, new_status: "OrderStatus") -> bool:
        """
        Check if transition to new status is valid.

        Args:
            new_status: Target status

        Returns:
            True if transition is allowed
        """
        return new_status in ORDER_STATUS_FLOW[self]

    def get_valid_transitions(self) -> list["OrderStatus"]:
        """Get list of valid next statuses."""
        return list(ORDER_STATUS_FLOW[self])

    def is_terminal(self) -> bool:
        """Check if this is a terminal (final) state."""
        return not ORDER_STATUS_FLOW[self]


# Transition rules: status -> valid next statuses
ORDER_STATUS_FLOW: dict[OrderStatus, tuple[OrderStatus, ...]] = {
    OrderStatus.DRAFT: (OrderStatus.PENDING, OrderStatus.CANCELLED),
    OrderStatus.PENDING: (OrderStatus.CONFIRMED, OrderStatus.CANCELLED),
    OrderStatus.CONFIRMED: (OrderStatus.COMPLETED, OrderStatus.CANCELLED),
    OrderStatus.CANCELLED: (),
    OrderStatus.COMPLETED: (),
}

# Statuses a vendor may request through the status endpoint
VENDOR_SETTABLE_STATUSES: frozenset[OrderStatus] = frozenset(
    {OrderStatus.CONFIRMED, OrderStatus.CANCELLED, OrderStatus.COMPLETED}
)


class PaymentStatus(StatusEnum):
    """Payment status for orders."""

    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"

    def is_successful(self) -> bool:
        """Check if payment was captured."""
        return self is PaymentStatus.SUCCESS

    def is_settled(self) -> bool:
        """Check if the payment reached a gateway outcome."""
        return self in (PaymentStatus.SUCCESS, PaymentStatus.FAILED, PaymentStatus.REFUNDED)


class PaymentMethod(StatusEnum):
    """How the customer pays for an order."""

    RAZORPAY = "RAZORPAY"
    CASH_ON_DELIVERY = "CASH_ON_DELIVERY"

    def uses_gateway(self) -> bool:
        """Check if an online gateway order must be opened."""
        return self is PaymentMethod.RAZORPAY
