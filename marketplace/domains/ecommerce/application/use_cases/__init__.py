"""
E-commerce Use Cases

Business use cases for the e-commerce domain.
Each use case represents a single business operation.
"""

from .cancel_order import (
    CancelOrderRequest,
    CancelOrderResponse,
    CancelOrderUseCase,
)
from .create_order import (
    CreateOrderRequest,
    CreateOrderResponse,
    CreateOrderUseCase,
    OrderItemInput,
)
from .get_order import (
    GetOrderRequest,
    GetOrderResponse,
    GetOrderUseCase,
)
from .handle_payment_webhook import (
    HandlePaymentWebhookRequest,
    HandlePaymentWebhookResponse,
    HandlePaymentWebhookUseCase,
)
from .list_orders import (
    GetCustomerOrdersUseCase,
    GetVendorOrdersUseCase,
    ListOrdersRequest,
)
from .update_order_status import (
    UpdateOrderStatusRequest,
    UpdateOrderStatusResponse,
    UpdateOrderStatusUseCase,
)
from .verify_payment import (
    VerifyPaymentRequest,
    VerifyPaymentResponse,
    VerifyPaymentUseCase,
)

__all__ = [
    # Create order
    "CreateOrderUseCase",
    "CreateOrderRequest",
    "CreateOrderResponse",
    "OrderItemInput",
    # Update status
    "UpdateOrderStatusUseCase",
    "UpdateOrderStatusRequest",
    "UpdateOrderStatusResponse",
    # Cancel order
    "CancelOrderUseCase",
    "CancelOrderRequest",
    "CancelOrderResponse",
    # Get order
    "GetOrderUseCase",
    "GetOrderRequest",
    "GetOrderResponse",
    # Listings
    "GetCustomerOrdersUseCase",
    "GetVendorOrdersUseCase",
    "ListOrdersRequest",
    # Settlement
    "VerifyPaymentUseCase",
    "VerifyPaymentRequest",
    "VerifyPaymentResponse",
    "HandlePaymentWebhookUseCase",
    "HandlePaymentWebhookRequest",
    "HandlePaymentWebhookResponse",
]
