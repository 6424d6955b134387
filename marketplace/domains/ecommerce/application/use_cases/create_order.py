"""
Create Order Use Case

Business logic for placing a new order.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from marketplace.core.domain import AuthorizationException
from marketplace.domains.ecommerce.application.dto import CustomerInfo
from marketplace.domains.ecommerce.application.ports import (
    ICatalogRepository,
    INotificationService,
    IOrderRepository,
    IPaymentGateway,
)
from marketplace.domains.ecommerce.application.use_cases.notifications import notify_safely, order_template_data
from marketplace.domains.ecommerce.domain.entities import Order
from marketplace.domains.ecommerce.domain.services import CartItem, CatalogValidator, CommissionService
from marketplace.domains.ecommerce.domain.value_objects import PaymentMethod, Principal

logger = logging.getLogger(__name__)


@dataclass
class OrderItemInput:
    """Input for order item."""

    product_id: UUID
    quantity: int
    unit_price: Decimal
    requires_delivery: bool = False
    delivery_address: str | None = None


@dataclass
class CreateOrderRequest:
    """Request for creating an order."""

    principal: Principal
    items: list[OrderItemInput]
    total_amount: Decimal
    payment_method: PaymentMethod = PaymentMethod.RAZORPAY


@dataclass
class CreateOrderResponse:
    """Response from order creation."""

    order: Order
    gateway_order_id: str | None = None


class CreateOrderUseCase:
    """
    Use Case: Create Order

    Places a single-vendor order for a customer.

    Responsibilities:
    - Validate the cart against live catalog state
    - Compute the commission split
    - Persist order, lines and payment in one transaction
    - Open a gateway payment order (best-effort)
    - Notify customer and vendor (best-effort)
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        catalog_repository: ICatalogRepository,
        payment_gateway: IPaymentGateway,
        notification_service: INotificationService,
        catalog_validator: CatalogValidator | None = None,
        commission_service: CommissionService | None = None,
    ):
        """
        Initialize use case with dependencies.

        Args:
            order_repository: Order ledger
            catalog_repository: Read access to products and vendors
            payment_gateway: External payment provider
            notification_service: Notification dispatcher
            catalog_validator: Cart validation rules
            commission_service: Commission calculator
        """
        self.order_repository = order_repository
        self.catalog_repository = catalog_repository
        self.payment_gateway = payment_gateway
        self.notification_service = notification_service
        self.catalog_validator = catalog_validator or CatalogValidator()
        self.commission_service = commission_service or CommissionService()

    async def execute(self, request: CreateOrderRequest) -> CreateOrderResponse:
        """
        Place an order.

        Args:
            request: Order creation request

        Returns:
            CreateOrderResponse with the persisted order

        Raises:
            AuthorizationException: If the caller is not a customer
            ValidationException: If the cart is malformed
            BusinessRuleViolationException: If a catalog rule is violated
        """
        principal = request.principal
        if not principal.is_customer:
            raise AuthorizationException("create_order", "order", str(principal.user_id))

        items = [
            CartItem(
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=item.unit_price,
                requires_delivery=item.requires_delivery,
                delivery_address=item.delivery_address,
            )
            for item in request.items
        ]
        product_ids = list(dict.fromkeys(item.product_id for item in items))
        products = await self.catalog_repository.find_available_products(product_ids)

        cart = self.catalog_validator.validate(items, request.total_amount, products)
        split = self.commission_service.split(cart.total_amount, cart.vendor.vendor_type)

        order = Order.place(
            customer_id=principal.user_id,
            vendor_id=cart.vendor.id,
            lines=cart.lines,
            commission_amount=split.commission_amount,
            payment_method=request.payment_method,
            vendor_user_id=cart.vendor.user_id,
        )
        created = await self.order_repository.create(order)

        logger.info(
            f"Order created: {created.order_number} for customer {principal.user_id} "
            f"(total={created.total_amount}, commission={created.commission_amount})"
        )

        gateway_order_id = None
        if request.payment_method.uses_gateway():
            gateway_order_id = await self._open_gateway_order(created, principal)

        await self._notify_placed(created)

        return CreateOrderResponse(order=created, gateway_order_id=gateway_order_id)

    async def _open_gateway_order(self, order: Order, principal: Principal) -> str | None:
        """Open the gateway order; on failure the order stays without gateway reference."""
        try:
            gateway_order_id = await self.payment_gateway.create_gateway_order(
                amount=order.total_amount,
                currency=self.payment_gateway.currency,
                order_id=order.id,
                customer_info=CustomerInfo(
                    customer_id=principal.user_id,
                    phone_number=principal.phone_number,
                ),
            )
            await self.order_repository.attach_gateway_order(order.id, gateway_order_id)
            if order.payment:
                order.payment.gateway_order_id = gateway_order_id
            return gateway_order_id
        except Exception as e:
            logger.error(f"Error creating gateway order for order {order.id}: {e}")
            return None

    async def _notify_placed(self, order: Order) -> None:
        data = order_template_data(order)
        await notify_safely(self.notification_service, order.customer_id, "ORDER_PLACED", data)
        await notify_safely(self.notification_service, order.vendor_user_id, "NEW_ORDER_VENDOR", data)


__all__ = ["CreateOrderUseCase", "CreateOrderRequest", "CreateOrderResponse", "OrderItemInput"]
