"""
Ecommerce Application Ports

Interface definitions (ports) for the ordering workflow.
Uses Protocol for structural typing.
"""

from decimal import Decimal
from typing import Any, Protocol, Sequence, runtime_checkable
from uuid import UUID

from marketplace.domains.ecommerce.application.dto import (
    CustomerInfo,
    OrderPage,
    PageRequest,
    SettlementResult,
    WebhookEvent,
)
from marketplace.domains.ecommerce.domain.entities import Order, Product
from marketplace.domains.ecommerce.domain.value_objects import OrderStatus


@runtime_checkable
class ICatalogRepository(Protocol):
    """
    Interface for the catalog store.

    Read-only from the ordering workflow's point of view.
    """

    async def find_available_products(self, product_ids: Sequence[UUID]) -> list[Product]:
        """Get the available products among the given ids, with their vendor"""
        ...


@runtime_checkable
class IOrderRepository(Protocol):
    """
    Interface for the order ledger.

    The only writer of orders, order lines and payments. Every status
    change re-checks the current status inside the same transaction.
    """

    async def create(self, order: Order) -> Order:
        """Persist order, lines and payment atomically"""
        ...

    async def get_by_id(self, order_id: UUID) -> Order | None:
        """Get order by ID"""
        ...

    async def find_by_gateway_order_id(self, gateway_order_id: str) -> Order | None:
        """Get order by its payment gateway order id"""
        ...

    async def list_for_customer(
        self, customer_id: UUID, page: PageRequest, status: OrderStatus | None = None
    ) -> OrderPage:
        """Orders placed by a customer, newest first"""
        ...

    async def list_for_vendor(self, vendor_id: UUID, page: PageRequest, status: OrderStatus | None = None) -> OrderPage:
        """Orders received by a vendor, newest first"""
        ...

    async def transition_status(
        self,
        order_id: UUID,
        new_status: OrderStatus,
        vendor_id: UUID | None = None,
        notes: str | None = None,
    ) -> Order:
        """Move order and lines to a new status, optionally checking vendor ownership"""
        ...

    async def cancel(self, order_id: UUID, customer_id: UUID) -> Order:
        """Cancel an order on behalf of its customer"""
        ...

    async def attach_gateway_order(self, order_id: UUID, gateway_order_id: str) -> None:
        """Store the gateway order id on the payment record"""
        ...

    async def record_payment_success(
        self, order_id: UUID, gateway_payment_id: str, signature: str | None = None
    ) -> SettlementResult:
        """Mark payment SUCCESS and confirm a pending order"""
        ...

    async def record_payment_failure(self, order_id: UUID, reason: str | None = None) -> SettlementResult:
        """Mark payment FAILED and cancel the order"""
        ...

    async def record_refund(self, order_id: UUID, refund_id: str, amount: Decimal) -> None:
        """Mark payment REFUNDED with the gateway refund id"""
        ...

    async def mark_refund_processed(
        self, refund_id: str, amount: Decimal | None = None, gateway_payment_id: str | None = None
    ) -> bool:
        """Confirm a refund reported by the gateway"""
        ...


@runtime_checkable
class IPaymentGateway(Protocol):
    """
    Interface for the external payment provider.
    """

    @property
    def currency(self) -> str:
        """Currency used for gateway orders"""
        ...

    async def create_gateway_order(
        self, amount: Decimal, currency: str, order_id: UUID, customer_info: CustomerInfo
    ) -> str:
        """Open a pending charge and return the gateway order id"""
        ...

    def verify_signature(self, gateway_order_id: str, gateway_payment_id: str, signature: str) -> bool:
        """Verify a checkout payment signature (fails closed)"""
        ...

    def parse_webhook(self, payload: bytes, signature: str | None) -> WebhookEvent:
        """Verify the webhook signature over the raw payload and parse the event"""
        ...

    async def initiate_refund(self, gateway_payment_id: str, amount: Decimal, reason: str) -> str:
        """Refund a captured payment and return the refund id"""
        ...


@runtime_checkable
class INotificationService(Protocol):
    """
    Interface for the notification dispatcher.

    Best-effort by contract: implementations never raise.
    """

    async def notify(
        self,
        user_id: UUID,
        title: str,
        message: str,
        notification_type: str,
        data: dict[str, Any] | None = None,
    ) -> None:
        """Send a notification to a user"""
        ...

    async def notify_template(
        self, user_id: UUID, template: str, data: dict[str, Any] | None = None
    ) -> None:
        """Send a templated notification to a user"""
        ...


__all__ = [
    "ICatalogRepository",
    "IOrderRepository",
    "IPaymentGateway",
    "INotificationService",
]
