"""
Verify Payment Use Case

Client-side settlement: the checkout returns a payment id and signature
that must be verified before the order is confirmed.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from marketplace.core.domain import AuthorizationException, EntityNotFoundException, PaymentException
from marketplace.domains.ecommerce.application.ports import INotificationService, IOrderRepository, IPaymentGateway
from marketplace.domains.ecommerce.application.use_cases.notifications import notify_safely, order_template_data
from marketplace.domains.ecommerce.application.use_cases.refunds import (
    LATE_CAPTURE_REFUND_REASON,
    refund_captured_payment,
)
from marketplace.domains.ecommerce.domain.entities import Order
from marketplace.domains.ecommerce.domain.value_objects import OrderStatus, Principal

logger = logging.getLogger(__name__)


@dataclass
class VerifyPaymentRequest:
    """Request for payment verification."""

    principal: Principal
    order_id: UUID
    gateway_order_id: str
    gateway_payment_id: str
    signature: str


@dataclass
class VerifyPaymentResponse:
    """Response from payment verification."""

    order: Order
    already_settled: bool = False


class VerifyPaymentUseCase:
    """
    Use Case: Verify Payment

    Verifies the checkout signature (fails closed), marks the payment
    SUCCESS and confirms a pending order. Replays are no-ops.
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

    async def execute(self, request: VerifyPaymentRequest) -> VerifyPaymentResponse:
        """
        Settle a checkout payment.

        Raises:
            AuthorizationException: If the caller is not the owning customer
            EntityNotFoundException: If the order does not exist
            PaymentException: If the gateway order does not match or the signature is invalid
        """
        principal = request.principal
        if not principal.is_customer:
            raise AuthorizationException("verify_payment", "order", str(principal.user_id))

        order = await self.order_repository.get_by_id(request.order_id)
        if order is None:
            raise EntityNotFoundException("Order", request.order_id, message="Order not found")
        if not order.is_owned_by_customer(principal.user_id):
            raise AuthorizationException("verify_payment", "order", str(principal.user_id))

        payment = order.payment
        if payment is None or not payment.gateway_order_id:
            raise PaymentException("No gateway payment is pending for this order", reason="NO_GATEWAY_ORDER")
        if payment.gateway_order_id != request.gateway_order_id:
            raise PaymentException(
                "Gateway order does not match this order",
                payment_id=request.gateway_payment_id,
                reason="GATEWAY_ORDER_MISMATCH",
            )

        if not self._signature_is_valid(request):
            logger.warning(f"Invalid payment signature for order {order.id} (payment {request.gateway_payment_id})")
            raise PaymentException(
                "Invalid payment signature",
                payment_id=request.gateway_payment_id,
                reason="INVALID_SIGNATURE",
            )

        result = await self.order_repository.record_payment_success(
            order.id, request.gateway_payment_id, request.signature
        )
        settled = result.order

        if not result.payment_updated:
            logger.info(f"Payment for order {settled.order_number} already settled; verification is a no-op")
            return VerifyPaymentResponse(order=settled, already_settled=True)

        logger.info(f"Payment {request.gateway_payment_id} verified for order {settled.order_number}")

        if settled.status is OrderStatus.CANCELLED:
            await refund_captured_payment(
                self.order_repository, self.payment_gateway, settled, LATE_CAPTURE_REFUND_REASON
            )
        else:
            await notify_safely(
                self.notification_service, settled.customer_id, "PAYMENT_SUCCESS", order_template_data(settled)
            )

        return VerifyPaymentResponse(order=settled)

    def _signature_is_valid(self, request: VerifyPaymentRequest) -> bool:
        try:
            return self.payment_gateway.verify_signature(
                request.gateway_order_id, request.gateway_payment_id, request.signature
            )
        except Exception as e:
            logger.error(f"Signature verification error for order {request.order_id}: {e}")
            return False


__all__ = ["VerifyPaymentUseCase", "VerifyPaymentRequest", "VerifyPaymentResponse"]
