"""
Get Order Use Case

Order detail scoped to the caller.
"""

from dataclasses import dataclass
from uuid import UUID

from marketplace.core.domain import AuthorizationException, EntityNotFoundException
from marketplace.domains.ecommerce.application.ports import IOrderRepository
from marketplace.domains.ecommerce.domain.entities import Order
from marketplace.domains.ecommerce.domain.value_objects import Principal


@dataclass
class GetOrderRequest:
    """Request for order detail."""

    principal: Principal
    order_id: UUID


@dataclass
class GetOrderResponse:
    """Response with order detail."""

    order: Order


class GetOrderUseCase:
    """
    Use Case: Get Order

    Customers see their own orders, vendors the orders placed with them and
    admins every order. Orders outside the caller's scope are reported as
    not found.
    """

    def __init__(self, order_repository: IOrderRepository):
        self.order_repository = order_repository

    async def execute(self, request: GetOrderRequest) -> GetOrderResponse:
        principal = request.principal
        if not (principal.is_customer or principal.is_vendor or principal.is_admin):
            raise AuthorizationException("get_order", "order", str(principal.user_id))

        order = await self.order_repository.get_by_id(request.order_id)
        if order is None or not order.is_visible_to(principal):
            raise EntityNotFoundException("Order", request.order_id, message="Order not found")

        return GetOrderResponse(order=order)


__all__ = ["GetOrderUseCase", "GetOrderRequest", "GetOrderResponse"]
