"""
Best-effort notification helper shared by the order use cases.
"""

import logging
from typing import Any
from uuid import UUID

from marketplace.domains.ecommerce.application.ports import INotificationService
from marketplace.domains.ecommerce.domain.entities import Order

logger = logging.getLogger(__name__)


def order_template_data(order: Order) -> dict[str, Any]:
    """Placeholders used by the order notification templates."""
    return {
        "orderId": order.order_number,
        "amount": str(order.total_amount),
        "order_id": str(order.id),
        "status": order.status.value,
    }


async def notify_safely(
    notification_service: INotificationService,
    user_id: UUID | None,
    template: str,
    data: dict[str, Any],
) -> None:
    """Send a templated notification; failures are logged and never propagated."""
    if user_id is None:
        logger.warning(f"No recipient for {template} notification (order {data.get('order_id')})")
        return
    try:
        await notification_service.notify_template(user_id, template, data)
    except Exception as e:
        logger.error(f"Error sending {template} notification for order {data.get('order_id')}: {e}")
