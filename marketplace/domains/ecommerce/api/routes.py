"""
E-commerce API Routes

FastAPI router for order endpoints. Every response uses the
{success, message, data?, meta?} envelope.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from marketplace.api.dependencies import get_current_principal
from marketplace.api.responses import success_response
from marketplace.domains.ecommerce.api.dependencies import (
    get_cancel_order_use_case,
    get_create_order_use_case,
    get_customer_orders_use_case,
    get_order_use_case,
    get_update_order_status_use_case,
    get_vendor_orders_use_case,
    get_verify_payment_use_case,
)
from marketplace.domains.ecommerce.api.schemas import (
    CreateOrderRequest,
    UpdateOrderStatusRequest,
    VerifyPaymentRequest,
    serialize_order,
)
from marketplace.domains.ecommerce.application import use_cases as uc
from marketplace.domains.ecommerce.application.dto import DEFAULT_LIMIT, MAX_LIMIT, PageRequest
from marketplace.domains.ecommerce.domain.value_objects import OrderStatus, Principal

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_order(
    request: CreateOrderRequest,
    principal: Principal = Depends(get_current_principal),  # noqa: B008
    use_case: uc.CreateOrderUseCase = Depends(get_create_order_use_case),  # noqa: B008
):
    """Place a single-vendor order (customer)."""
    use_case_request = uc.CreateOrderRequest(
        principal=principal,
        items=[
            uc.OrderItemInput(
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=item.unit_price,
                requires_delivery=item.requires_delivery,
                delivery_address=item.delivery_address,
            )
            for item in request.items
        ],
        total_amount=request.total_amount,
        payment_method=request.payment_method,
    )
    result = await use_case.execute(use_case_request)
    return success_response("Order placed successfully", serialize_order(result.order))


@router.get("/customer/my-orders")
async def get_customer_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    order_status: OrderStatus | None = Query(None, alias="status"),
    principal: Principal = Depends(get_current_principal),  # noqa: B008
    use_case: uc.GetCustomerOrdersUseCase = Depends(get_customer_orders_use_case),  # noqa: B008
):
    """List the caller's orders, newest first (customer)."""
    result = await use_case.execute(
        uc.ListOrdersRequest(principal=principal, page=PageRequest.create(page, limit), status=order_status)
    )
    return success_response(
        "Orders retrieved successfully",
        [serialize_order(order) for order in result.orders],
        meta=result.meta(),
    )


@router.get("/vendor/my-orders")
async def get_vendor_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    order_status: OrderStatus | None = Query(None, alias="status"),
    principal: Principal = Depends(get_current_principal),  # noqa: B008
    use_case: uc.GetVendorOrdersUseCase = Depends(get_vendor_orders_use_case),  # noqa: B008
):
    """List orders placed with the caller's store, newest first (vendor)."""
    result = await use_case.execute(
        uc.ListOrdersRequest(principal=principal, page=PageRequest.create(page, limit), status=order_status)
    )
    return success_response(
        "Orders retrieved successfully",
        [serialize_order(order) for order in result.orders],
        meta=result.meta(),
    )


@router.get("/{order_id}")
async def get_order(
    order_id: UUID,
    principal: Principal = Depends(get_current_principal),  # noqa: B008
    use_case: uc.GetOrderUseCase = Depends(get_order_use_case),  # noqa: B008
):
    """Get order detail, scoped to the caller's role."""
    result = await use_case.execute(uc.GetOrderRequest(principal=principal, order_id=order_id))
    return success_response("Order retrieved successfully", serialize_order(result.order))


@router.patch("/{order_id}/status")
async def update_order_status(
    order_id: UUID,
    request: UpdateOrderStatusRequest,
    principal: Principal = Depends(get_current_principal),  # noqa: B008
    use_case: uc.UpdateOrderStatusUseCase = Depends(get_update_order_status_use_case),  # noqa: B008
):
    """Move an order along its lifecycle (owning vendor)."""
    result = await use_case.execute(
        uc.UpdateOrderStatusRequest(
            principal=principal,
            order_id=order_id,
            status=request.status,
            notes=request.notes,
        )
    )
    return success_response("Order status updated", serialize_order(result.order))


@router.patch("/{order_id}/cancel")
async def cancel_order(
    order_id: UUID,
    principal: Principal = Depends(get_current_principal),  # noqa: B008
    use_case: uc.CancelOrderUseCase = Depends(get_cancel_order_use_case),  # noqa: B008
):
    """Cancel an order (owning customer). Refunds a captured payment best-effort."""
    result = await use_case.execute(uc.CancelOrderRequest(principal=principal, order_id=order_id))
    return success_response("Order cancelled successfully", serialize_order(result.order))


@router.post("/{order_id}/payment/verify")
async def verify_payment(
    order_id: UUID,
    request: VerifyPaymentRequest,
    principal: Principal = Depends(get_current_principal),  # noqa: B008
    use_case: uc.VerifyPaymentUseCase = Depends(get_verify_payment_use_case),  # noqa: B008
):
    """Settle a checkout payment after verifying its signature (owning customer)."""
    result = await use_case.execute(
        uc.VerifyPaymentRequest(
            principal=principal,
            order_id=order_id,
            gateway_order_id=request.gateway_order_id,
            gateway_payment_id=request.gateway_payment_id,
            signature=request.signature,
        )
    )
    message = "Payment already verified" if result.already_settled else "Payment verified successfully"
    return success_response(message, serialize_order(result.order))


__all__ = ["router"]
