"""
Razorpay Webhook Handler

Receives payment and refund events from Razorpay and settles the matching
order.

Webhook Flow:
1. Razorpay sends POST with X-Razorpay-Signature (HMAC-SHA256 of the raw body)
2. Verify the signature with RAZORPAY_WEBHOOK_SECRET (400 on mismatch)
3. Locate the order by gateway order id, falling back to notes.order_id
4. payment.captured -> payment SUCCESS, order CONFIRMED
   payment.failed -> payment FAILED, order CANCELLED
   refund.processed -> payment REFUNDED
5. Any other event is acknowledged and ignored

Endpoint: POST /api/v1/webhooks/razorpay
"""

import logging

from fastapi import APIRouter, Depends, Header, Request

from marketplace.api.responses import success_response
from marketplace.domains.ecommerce.api.dependencies import get_handle_payment_webhook_use_case
from marketplace.domains.ecommerce.application.use_cases import (
    HandlePaymentWebhookRequest,
    HandlePaymentWebhookUseCase,
)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])
logger = logging.getLogger(__name__)


@router.post("/razorpay")
async def razorpay_webhook(
    request: Request,
    x_razorpay_signature: str | None = Header(None),
    use_case: HandlePaymentWebhookUseCase = Depends(get_handle_payment_webhook_use_case),  # noqa: B008
):
    """
    Handle Razorpay webhook deliveries.

    Note: Events that do not match an order are acknowledged with 200 so
    Razorpay does not keep retrying them.
    """
    raw_body = await request.body()
    logger.info(f"[RAZORPAY-WEBHOOK] Payload received ({len(raw_body)} bytes)")

    result = await use_case.execute(HandlePaymentWebhookRequest(payload=raw_body, signature=x_razorpay_signature))

    return success_response(
        "Webhook processed" if result.handled else "Webhook ignored",
        {"event": result.event, "handled": result.handled, "orderId": result.order_id},
    )
