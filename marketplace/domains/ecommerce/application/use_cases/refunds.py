"""
Best-effort refund helper shared by the order use cases.
"""

import logging

from marketplace.domains.ecommerce.application.ports import IOrderRepository, IPaymentGateway
from marketplace.domains.ecommerce.domain.entities import Order

logger = logging.getLogger(__name__)

LATE_CAPTURE_REFUND_REASON = "Payment captured for cancelled order"


async def refund_captured_payment(
    order_repository: IOrderRepository,
    payment_gateway: IPaymentGateway,
    order: Order,
    reason: str,
) -> str | None:
    """
    Refund the full amount of a captured payment.

    Returns the gateway refund id, or None when there was nothing to refund
    or the gateway call failed. Failures are logged with the order id for
    out-of-band reconciliation.
    """
    payment = order.payment
    if payment is None or not payment.is_refundable():
        return None

    try:
        refund_id = await payment_gateway.initiate_refund(payment.gateway_payment_id, payment.total_amount, reason)
    except Exception as e:
        logger.error(f"Refund failed for order {order.id} (payment {payment.gateway_payment_id}): {e}")
        return None

    try:
        await order_repository.record_refund(order.id, refund_id, payment.total_amount)
        payment.mark_refunded(refund_id, payment.total_amount)
    except Exception as e:
        logger.error(f"Refund {refund_id} issued but not recorded for order {order.id}: {e}")

    logger.info(f"Refund {refund_id} initiated for order {order.order_number}")
    return refund_id
