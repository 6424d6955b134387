"""
Cancel Order Use Case

Customer cancellation with refund-on-cancel.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from marketplace.core.domain import AuthorizationException
from marketplace.domains.ecommerce.application.ports import INotificationService, IOrderRepository, IPaymentGateway
from marketplace.domains.ecommerce.application.use_cases.notifications import notify_safely, order_template_data
from marketplace.domains.ecommerce.application.use_cases.refunds import refund_captured_payment
from marketplace.domains.ecommerce.domain.entities import Order
from marketplace.domains.ecommerce.domain.value_objects import Principal

logger = logging.getLogger(__name__)

CANCELLATION_REFUND_REASON = "Customer cancellation"


@dataclass
class CancelOrderRequest:
    """Request for cancelling an order."""

    principal: Principal
    order_id: UUID


@dataclass
class CancelOrderResponse:
    """Response from order cancellation."""

    order: Order
    refund_initiated: bool = False
    refund_id: str | None = None


class CancelOrderUseCase:
    """
    Use Case: Cancel Order

    Cancels an order on behalf of the owning customer. When the payment was
    already captured, exactly one refund of the full amount is requested
    from the gateway; a failed refund is logged for reconciliation and does
    not revert the cancellation.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        payment_gateway: IPaymentGateway,
        notification_service: INotificationService,
    ):
        self.order_repository = order_repository
        self.payment_gateway = payment_gateway
        self.notification_service = notification_service

    async def execute(self, request: CancelOrderRequest) -> CancelOrderResponse:
        """
        Cancel an order.

        Raises:
            AuthorizationException: If the caller is not the owning customer
            EntityNotFoundException: If the order does not exist
            BusinessRuleViolationException: If already completed or cancelled
        """
        principal = request.principal
        if not principal.is_customer:
            raise AuthorizationException("cancel_order", "order", str(principal.user_id))

        order = await self.order_repository.cancel(request.order_id, principal.user_id)
        logger.info(f"Order {order.order_number} cancelled by customer {principal.user_id}")

        refund_id = await refund_captured_payment(
            self.order_repository, self.payment_gateway, order, CANCELLATION_REFUND_REASON
        )

        await notify_safely(
            self.notification_service, order.vendor_user_id, "ORDER_CANCELLED", order_template_data(order)
        )

        return CancelOrderResponse(order=order, refund_initiated=refund_id is not None, refund_id=refund_id)


__all__ = ["CancelOrderUseCase", "CancelOrderRequest", "CancelOrderResponse", "CANCELLATION_REFUND_REASON"]
