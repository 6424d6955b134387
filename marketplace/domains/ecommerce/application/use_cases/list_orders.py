"""
List Orders Use Cases

Paginated order listings for customers and vendors.
"""

import logging
from dataclasses import dataclass

from marketplace.core.domain import AuthorizationException
from marketplace.domains.ecommerce.application.dto import OrderPage, PageRequest
from marketplace.domains.ecommerce.application.ports import IOrderRepository
from marketplace.domains.ecommerce.domain.value_objects import OrderStatus, Principal

logger = logging.getLogger(__name__)


@dataclass
class ListOrdersRequest:
    """Request for an order listing."""

    principal: Principal
    page: PageRequest
    status: OrderStatus | None = None


class GetCustomerOrdersUseCase:
    """
    Use Case: Get Customer Orders

    Orders placed by the calling customer, newest first.
    """

    def __init__(self, order_repository: IOrderRepository):
        self.order_repository = order_repository

    async def execute(self, request: ListOrdersRequest) -> OrderPage:
        principal = request.principal
        if not principal.is_customer:
            raise AuthorizationException("list_customer_orders", "order", str(principal.user_id))

        result = await self.order_repository.list_for_customer(principal.user_id, request.page, request.status)
        logger.debug(f"Found {result.total} orders for customer {principal.user_id}")
        return result


class GetVendorOrdersUseCase:
    """
    Use Case: Get Vendor Orders

    Orders received by the calling vendor, newest first.
    """

    def __init__(self, order_repository: IOrderRepository):
        self.order_repository = order_repository

    async def execute(self, request: ListOrdersRequest) -> OrderPage:
        principal = request.principal
        if not principal.is_vendor or principal.vendor_id is None:
            raise AuthorizationException("list_vendor_orders", "order", str(principal.user_id))

        result = await self.order_repository.list_for_vendor(principal.vendor_id, request.page, request.status)
        logger.debug(f"Found {result.total} orders for vendor {principal.vendor_id}")
        return result


__all__ = ["ListOrdersRequest", "GetCustomerOrdersUseCase", "GetVendorOrdersUseCase"]
