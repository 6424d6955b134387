"""
Handle Payment Webhook Use Case

Server-to-server settlement events pushed by the payment gateway.
"""

import logging
from dataclasses import dataclass

from marketplace.domains.ecommerce.application.dto import WebhookEvent
from marketplace.domains.ecommerce.application.ports import INotificationService, IOrderRepository, IPaymentGateway
from marketplace.domains.ecommerce.application.use_cases.notifications import notify_safely, order_template_data
from marketplace.domains.ecommerce.application.use_cases.refunds import (
    LATE_CAPTURE_REFUND_REASON,
    refund_captured_payment,
)
from marketplace.domains.ecommerce.domain.entities import Order
from marketplace.domains.ecommerce.domain.value_objects import OrderStatus

logger = logging.getLogger(__name__)

PAYMENT_CAPTURED = "payment.captured"
PAYMENT_FAILED = "payment.failed"
REFUND_PROCESSED = "refund.processed"


@dataclass
class HandlePaymentWebhookRequest:
    """Raw webhook as received over HTTP."""

    payload: bytes
    signature: str | None


@dataclass
class HandlePaymentWebhookResponse:
    """Outcome of a webhook delivery."""

    event: str
    handled: bool = False
    order_id: str | None = None


class HandlePaymentWebhookUseCase:
    """
    Use Case: Handle Payment Webhook

    The signature over the raw payload is checked before anything else.
    Events that do not resolve to a known order are acknowledged and
    ignored so the gateway stops redelivering them.
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

    async def execute(self, request: HandlePaymentWebhookRequest) -> HandlePaymentWebhookResponse:
        """
        Process a webhook delivery.

        Raises:
            PaymentException: If the signature is missing or invalid, or the payload is malformed
        """
        event = self.payment_gateway.parse_webhook(request.payload, request.signature)
        logger.info(f"Payment webhook received: {event.event}")

        if event.event == REFUND_PROCESSED:
            return await self._handle_refund_processed(event)

        if event.event not in (PAYMENT_CAPTURED, PAYMENT_FAILED):
            logger.info(f"Ignoring unsupported webhook event: {event.event}")
            return HandlePaymentWebhookResponse(event=event.event)

        order = await self._find_order(event)
        if order is None:
            logger.warning(
                f"Webhook {event.event} for unknown order "
                f"(gateway order {event.gateway_order_id}, notes order {event.order_id})"
            )
            return HandlePaymentWebhookResponse(event=event.event)

        if event.event == PAYMENT_CAPTURED:
            await self._handle_captured(order, event)
        else:
            await self._handle_failed(order, event)

        return HandlePaymentWebhookResponse(event=event.event, handled=True, order_id=str(order.id))

    async def _find_order(self, event: WebhookEvent) -> Order | None:
        if event.gateway_order_id:
            order = await self.order_repository.find_by_gateway_order_id(event.gateway_order_id)
            if order is not None:
                return order
        if event.order_id:
            return await self.order_repository.get_by_id(event.order_id)
        return None

    async def _handle_captured(self, order: Order, event: WebhookEvent) -> None:
        if not event.gateway_payment_id:
            logger.warning(f"payment.captured without payment id for order {order.id}")
            return

        result = await self.order_repository.record_payment_success(order.id, event.gateway_payment_id)
        if not result.payment_updated:
            logger.info(f"Payment for order {order.order_number} already settled; webhook ignored")
            return

        settled = result.order
        if settled.status is OrderStatus.CANCELLED:
            logger.warning(f"Payment captured for cancelled order {settled.order_number}; refunding")
            await refund_captured_payment(
                self.order_repository, self.payment_gateway, settled, LATE_CAPTURE_REFUND_REASON
            )
            return

        await notify_safely(
            self.notification_service, settled.customer_id, "PAYMENT_SUCCESS", order_template_data(settled)
        )

    async def _handle_failed(self, order: Order, event: WebhookEvent) -> None:
        result = await self.order_repository.record_payment_failure(order.id, event.error_description)
        if result.status_changed:
            data = order_template_data(result.order)
            await notify_safely(self.notification_service, result.order.customer_id, "ORDER_CANCELLED", data)
        logger.info(f"Payment failed for order {order.order_number}: {event.error_description}")

    async def _handle_refund_processed(self, event: WebhookEvent) -> HandlePaymentWebhookResponse:
        if not event.refund_id:
            logger.warning("refund.processed without refund id")
            return HandlePaymentWebhookResponse(event=event.event)

        handled = await self.order_repository.mark_refund_processed(
            event.refund_id, event.amount, event.gateway_payment_id
        )
        if not handled:
            logger.warning(f"refund.processed for unknown refund {event.refund_id}")
        return HandlePaymentWebhookResponse(event=event.event, handled=handled)


__all__ = [
    "HandlePaymentWebhookUseCase",
    "HandlePaymentWebhookRequest",
    "HandlePaymentWebhookResponse",
    "PAYMENT_CAPTURED",
    "PAYMENT_FAILED",
    "REFUND_PROCESSED",
]
