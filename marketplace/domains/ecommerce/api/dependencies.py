"""
E-commerce API Dependencies

FastAPI dependencies for the e-commerce domain.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.container import DependencyContainer
from marketplace.core.container import get_container as get_global_container
from marketplace.database.async_db import get_async_db
from marketplace.domains.ecommerce.application.use_cases import (
    CancelOrderUseCase,
    CreateOrderUseCase,
    GetCustomerOrdersUseCase,
    GetOrderUseCase,
    GetVendorOrdersUseCase,
    HandlePaymentWebhookUseCase,
    UpdateOrderStatusUseCase,
    VerifyPaymentUseCase,
)


def get_container() -> DependencyContainer:
    """Get dependency container instance."""
    return get_global_container()


def get_create_order_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_container),  # noqa: B008
) -> CreateOrderUseCase:
    """Get CreateOrderUseCase instance."""
    return container.create_create_order_use_case(db)


def get_update_order_status_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_container),  # noqa: B008
) -> UpdateOrderStatusUseCase:
    """Get UpdateOrderStatusUseCase instance."""
    return container.create_update_order_status_use_case(db)


def get_cancel_order_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_container),  # noqa: B008
) -> CancelOrderUseCase:
    """Get CancelOrderUseCase instance."""
    return container.create_cancel_order_use_case(db)


def get_order_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_container),  # noqa: B008
) -> GetOrderUseCase:
    """Get GetOrderUseCase instance."""
    return container.create_get_order_use_case(db)


def get_customer_orders_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_container),  # noqa: B008
) -> GetCustomerOrdersUseCase:
    """Get GetCustomerOrdersUseCase instance."""
    return container.create_get_customer_orders_use_case(db)


def get_vendor_orders_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_container),  # noqa: B008
) -> GetVendorOrdersUseCase:
    """Get GetVendorOrdersUseCase instance."""
    return container.create_get_vendor_orders_use_case(db)


def get_verify_payment_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_container),  # noqa: B008
) -> VerifyPaymentUseCase:
    """Get VerifyPaymentUseCase instance."""
    return container.create_verify_payment_use_case(db)


def get_handle_payment_webhook_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_container),  # noqa: B008
) -> HandlePaymentWebhookUseCase:
    """Get HandlePaymentWebhookUseCase instance."""
    return container.create_handle_payment_webhook_use_case(db)


__all__ = [
    "get_container",
    "get_create_order_use_case",
    "get_update_order_status_use_case",
    "get_cancel_order_use_case",
    "get_order_use_case",
    "get_customer_orders_use_case",
    "get_vendor_orders_use_case",
    "get_verify_payment_use_case",
    "get_handle_payment_webhook_use_case",
]
