"""
Update Order Status Use Case

Vendor-driven status changes along the order state machine.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from marketplace.core.domain import AuthorizationException, ValidationException
from marketplace.domains.ecommerce.application.ports import INotificationService, IOrderRepository
from marketplace.domains.ecommerce.application.use_cases.notifications import notify_safely, order_template_data
from marketplace.domains.ecommerce.domain.entities import Order
from marketplace.domains.ecommerce.domain.value_objects import VENDOR_SETTABLE_STATUSES, OrderStatus, Principal

logger = logging.getLogger(__name__)

STATUS_TEMPLATES: dict[OrderStatus, str] = {
    OrderStatus.CONFIRMED: "ORDER_CONFIRMED",
    OrderStatus.COMPLETED: "ORDER_COMPLETED",
    OrderStatus.CANCELLED: "ORDER_CANCELLED",
}


@dataclass
class UpdateOrderStatusRequest:
    """Request for a vendor status change."""

    principal: Principal
    order_id: UUID
    status: OrderStatus
    notes: str | None = None


@dataclass
class UpdateOrderStatusResponse:
    """Response from a status change."""

    order: Order


class UpdateOrderStatusUseCase:
    """
    Use Case: Update Order Status

    Lets the owning vendor confirm, complete or cancel an order. The ledger
    re-checks the current status under a row lock; the customer is notified
    once the change is committed.
    """

    def __init__(self, order_repository: IOrderRepository, notification_service: INotificationService):
        self.order_repository = order_repository
        self.notification_service = notification_service

    async def execute(self, request: UpdateOrderStatusRequest) -> UpdateOrderStatusResponse:
        """
        Change the status of an order.

        Raises:
            AuthorizationException: If the caller is not the owning vendor
            ValidationException: If the target status cannot be set by a vendor
            EntityNotFoundException: If the order does not exist
            InvalidStateTransitionException: If the move is not allowed
        """
        principal = request.principal
        if not principal.is_vendor:
            raise AuthorizationException("update_order_status", "order", str(principal.user_id))

        if request.status not in VENDOR_SETTABLE_STATUSES:
            raise ValidationException(
                f"Status must be one of: {', '.join(sorted(s.value for s in VENDOR_SETTABLE_STATUSES))}",
                field="status",
            )

        order = await self.order_repository.transition_status(
            request.order_id,
            request.status,
            vendor_id=principal.vendor_id,
            notes=request.notes,
        )

        logger.info(f"Order {order.order_number} status updated to {order.status.value} (vendor {principal.vendor_id})")

        template = STATUS_TEMPLATES.get(order.status)
        if template:
            await notify_safely(self.notification_service, order.customer_id, template, order_template_data(order))

        return UpdateOrderStatusResponse(order=order)


__all__ = ["UpdateOrderStatusUseCase", "UpdateOrderStatusRequest", "UpdateOrderStatusResponse"]
