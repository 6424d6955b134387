"""
Razorpay Payment Gateway Adapter

Implements IPaymentGateway on top of RazorpayClient. Client errors are
translated into IntegrationException; signature checks never raise and
fail closed.
"""

import hashlib
import hmac
import json
import logging
from decimal import Decimal
from typing import Any, Callable
from uuid import UUID

from marketplace.clients.razorpay_client import RazorpayClient, RazorpayError
from marketplace.config.settings import Settings, get_settings
from marketplace.core.domain import IntegrationException, Money, PaymentException
from marketplace.domains.ecommerce.application.dto import CustomerInfo, WebhookEvent
from marketplace.domains.ecommerce.application.ports import IPaymentGateway

logger = logging.getLogger(__name__)

SERVICE_NAME = "razorpay"


def compute_signature(secret: str, message: bytes) -> str:
    """HMAC-SHA256 hex digest used by Razorpay for checkout and webhook signatures."""
    return hmac.new(secret.encode("utf-8"), msg=message, digestmod=hashlib.sha256).hexdigest()


class RazorpayPaymentGateway(IPaymentGateway):
    """
    Payment gateway adapter for Razorpay.

    Example:
        ```python
        gateway = RazorpayPaymentGateway(settings)
        gateway_order_id = await gateway.create_gateway_order(
            Decimal("200.00"), "INR", order.id, CustomerInfo(customer_id=customer_id)
        )
        ```
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client_factory: Callable[[], RazorpayClient] | None = None,
    ):
        self.settings = settings or get_settings()
        self._client_factory = client_factory or (lambda: RazorpayClient(self.settings))

    @property
    def currency(self) -> str:
        return self.settings.PAYMENT_CURRENCY

    async def create_gateway_order(
        self, amount: Decimal, currency: str, order_id: UUID, customer_info: CustomerInfo
    ) -> str:
        """
        Open a pending charge for an order.

        Raises:
            IntegrationException: If Razorpay is not configured or the call fails
        """
        if not self.settings.razorpay_configured:
            raise IntegrationException(SERVICE_NAME, "Razorpay is not configured")

        notes = {"order_id": str(order_id), "customer_id": str(customer_info.customer_id)}
        if customer_info.phone_number:
            notes["phone_number"] = customer_info.phone_number

        try:
            async with self._client_factory() as client:
                data = await client.create_order(
                    amount=Money(amount, currency).to_minor_units(),
                    currency=currency,
                    receipt=str(order_id),
                    notes=notes,
                )
        except RazorpayError as e:
            raise IntegrationException(SERVICE_NAME, f"Could not create gateway order: {e.error_message}", e) from e

        gateway_order_id = data.get("id")
        if not gateway_order_id:
            raise IntegrationException(SERVICE_NAME, "Gateway order response without id")
        return gateway_order_id

    def verify_signature(self, gateway_order_id: str, gateway_payment_id: str, signature: str) -> bool:
        """Verify a checkout signature: HMAC-SHA256(key_secret, "order_id|payment_id")."""
        secret = self.settings.RAZORPAY_KEY_SECRET
        if not (secret and gateway_order_id and gateway_payment_id and signature):
            return False
        expected = compute_signature(secret, f"{gateway_order_id}|{gateway_payment_id}".encode("utf-8"))
        return hmac.compare_digest(expected, signature)

    def verify_webhook_signature(self, payload: bytes, signature: str | None) -> bool:
        """Verify a webhook signature: HMAC-SHA256(webhook_secret, raw body)."""
        secret = self.settings.RAZORPAY_WEBHOOK_SECRET
        if not (secret and signature):
            return False
        return hmac.compare_digest(compute_signature(secret, payload), signature)

    def parse_webhook(self, payload: bytes, signature: str | None) -> WebhookEvent:
        """
        Verify and parse a webhook delivery.

        Raises:
            PaymentException: If the signature is invalid or the payload is malformed
        """
        if not self.verify_webhook_signature(payload, signature):
            logger.warning("Razorpay webhook signature verification failed")
            raise PaymentException("Invalid webhook signature", reason="INVALID_SIGNATURE")

        try:
            body = json.loads(payload)
        except ValueError as e:
            raise PaymentException("Malformed webhook payload", reason="MALFORMED_PAYLOAD") from e
        if not isinstance(body, dict) or not body.get("event"):
            raise PaymentException("Malformed webhook payload", reason="MALFORMED_PAYLOAD")

        entities = body.get("payload") or {}
        payment = self._entity(entities, "payment")
        refund = self._entity(entities, "refund")

        amount = None
        if refund.get("amount") is not None:
            try:
                minor_units = int(refund["amount"])
            except (TypeError, ValueError) as e:
                raise PaymentException("Malformed webhook payload", reason="MALFORMED_PAYLOAD") from e
            amount = Money.from_minor_units(minor_units, refund.get("currency") or self.currency).amount

        return WebhookEvent(
            event=body["event"],
            gateway_order_id=payment.get("order_id"),
            gateway_payment_id=payment.get("id") or refund.get("payment_id"),
            refund_id=refund.get("id"),
            order_id=self._order_id_from_notes(payment.get("notes")),
            error_description=payment.get("error_description"),
            amount=amount,
            payload=body,
        )

    async def initiate_refund(self, gateway_payment_id: str, amount: Decimal, reason: str) -> str:
        """
        Refund a captured payment.

        Raises:
            IntegrationException: If the refund call fails
        """
        try:
            async with self._client_factory() as client:
                data = await client.create_refund(
                    gateway_payment_id,
                    amount=Money(amount, self.currency).to_minor_units(),
                    notes={"reason": reason},
                )
        except RazorpayError as e:
            raise IntegrationException(SERVICE_NAME, f"Could not create refund: {e.error_message}", e) from e

        refund_id = data.get("id")
        if not refund_id:
            raise IntegrationException(SERVICE_NAME, "Refund response without id")
        return refund_id

    @staticmethod
    def _entity(entities: dict[str, Any], name: str) -> dict[str, Any]:
        wrapper = entities.get(name) or {}
        entity = wrapper.get("entity") if isinstance(wrapper, dict) else None
        return entity if isinstance(entity, dict) else {}

    @staticmethod
    def _order_id_from_notes(notes: Any) -> UUID | None:
        # Razorpay sends an empty list when there are no notes
        if not isinstance(notes, dict) or not notes.get("order_id"):
            return None
        try:
            return UUID(str(notes["order_id"]))
        except ValueError:
            logger.warning(f"Ignoring malformed order_id in webhook notes: {notes['order_id']}")
            return None
