"""
Notification Dispatcher.

Sends order lifecycle notifications through pluggable channels. Delivery
is best-effort and at-most-once: every failure is logged and swallowed.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol, Sequence
from uuid import UUID

import httpx

from marketplace.config.settings import Settings, get_settings
from marketplace.core.domain import StatusEnum
from marketplace.domains.ecommerce.application.ports import INotificationService

logger = logging.getLogger(__name__)

BULK_BATCH_SIZE = 100


class NotificationType(StatusEnum):
    """Notification categories."""

    ORDER_UPDATE = "ORDER_UPDATE"
    PAYMENT_SUCCESS = "PAYMENT_SUCCESS"
    VENDOR_APPROVAL = "VENDOR_APPROVAL"
    GENERAL = "GENERAL"


@dataclass(frozen=True)
class NotificationTemplate:
    """Title and message with {placeholder} substitution."""

    title: str
    message: str
    notification_type: NotificationType = NotificationType.ORDER_UPDATE

    def render(self, data: dict[str, Any]) -> tuple[str, str]:
        message = self.message
        for key, value in data.items():
            message = message.replace(f"{{{key}}}", str(value))
        return self.title, message


NOTIFICATION_TEMPLATES: dict[str, NotificationTemplate] = {
    "ORDER_PLACED": NotificationTemplate(
        title="Order Placed Successfully",
        message="Your order #{orderId} has been placed and is awaiting vendor confirmation.",
    ),
    "ORDER_CONFIRMED": NotificationTemplate(
        title="Order Confirmed",
        message="Your order #{orderId} has been confirmed by the vendor.",
    ),
    "ORDER_COMPLETED": NotificationTemplate(
        title="Order Completed",
        message="Your order #{orderId} has been completed. Thank you for shopping with us!",
    ),
    "ORDER_CANCELLED": NotificationTemplate(
        title="Order Cancelled",
        message="Your order #{orderId} has been cancelled.",
    ),
    "NEW_ORDER_VENDOR": NotificationTemplate(
        title="New Order Received",
        message="You have received a new order #{orderId} worth ₹{amount}.",
    ),
    "PAYMENT_SUCCESS": NotificationTemplate(
        title="Payment Successful",
        message="Payment of ₹{amount} for order #{orderId} has been processed successfully.",
        notification_type=NotificationType.PAYMENT_SUCCESS,
    ),
    "VENDOR_APPROVED": NotificationTemplate(
        title="Vendor Application Approved",
        message="Congratulations! Your vendor application has been approved. You can now start listing products.",
        notification_type=NotificationType.VENDOR_APPROVAL,
    ),
    "VENDOR_REJECTED": NotificationTemplate(
        title="Vendor Application Rejected",
        message="Your vendor application has been rejected. Please contact support for more information.",
        notification_type=NotificationType.VENDOR_APPROVAL,
    ),
}


@dataclass
class Notification:
    """A rendered notification addressed to one user."""

    user_id: UUID
    title: str
    message: str
    notification_type: str
    data: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": str(self.user_id),
            "title": self.title,
            "message": self.message,
            "type": self.notification_type,
            "data": self.data,
            "created_at": self.created_at.isoformat(),
        }


class NotificationChannel(Protocol):
    """A delivery mechanism (log, webhook, push, SMS...)."""

    name: str

    async def send(self, notification: Notification) -> None: ...


class LoggingNotificationChannel:
    """Writes notifications to the application log."""

    name = "log"

    async def send(self, notification: Notification) -> None:
        logger.info(
            f"Notification to user {notification.user_id} [{notification.notification_type}] "
            f"{notification.title}: {notification.message}"
        )


class WebhookNotificationChannel:
    """POSTs notifications as JSON to an HTTP endpoint."""

    name = "webhook"

    def __init__(self, url: str, timeout: float = 5.0, transport: httpx.AsyncBaseTransport | None = None):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def send(self, notification: Notification) -> None:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(self.url, json=notification.to_dict())
            response.raise_for_status()


class NotificationDispatcher(INotificationService):
    """
    Fans notifications out to every configured channel.

    Never raises: a failing channel is logged and the others still run.

    The order use cases call notify_template. notify_bulk and
    notify_vendor_decision serve admin announcements and vendor onboarding,
    which live outside this service and call the dispatcher directly.
    """

    def __init__(self, channels: Sequence[NotificationChannel] | None = None, enabled: bool = True):
        if channels is None:
            channels = [LoggingNotificationChannel()]
        self.channels: list[NotificationChannel] = list(channels)
        self.enabled = enabled

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "NotificationDispatcher":
        """Build the dispatcher from configuration (log channel always, webhook when configured)."""
        settings = settings or get_settings()
        channels: list[NotificationChannel] = [LoggingNotificationChannel()]
        if settings.NOTIFICATION_WEBHOOK_URL:
            channels.append(
                WebhookNotificationChannel(settings.NOTIFICATION_WEBHOOK_URL, timeout=settings.NOTIFICATION_TIMEOUT)
            )
        return cls(channels=channels, enabled=settings.NOTIFICATIONS_ENABLED)

    async def notify(
        self,
        user_id: UUID,
        title: str,
        message: str,
        notification_type: str,
        data: dict[str, Any] | None = None,
    ) -> None:
        """Send a notification to a user."""
        if not self.enabled:
            logger.debug(f"Notifications disabled; dropping '{title}' for user {user_id}")
            return

        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            notification_type=getattr(notification_type, "value", notification_type),
            data=data or {},
        )

        for channel in self.channels:
            try:
                await channel.send(notification)
            except Exception as e:
                logger.error(f"Error sending notification via {channel.name} to user {user_id}: {e}")

    async def notify_template(self, user_id: UUID, template: str, data: dict[str, Any] | None = None) -> None:
        """Send a templated notification to a user."""
        notification_template = NOTIFICATION_TEMPLATES.get(template)
        if notification_template is None:
            logger.error(f"Unknown notification template: {template}")
            return

        data = data or {}
        title, message = notification_template.render(data)
        await self.notify(user_id, title, message, notification_template.notification_type.value, data)

    async def notify_bulk(
        self,
        user_ids: Sequence[UUID],
        title: str,
        message: str,
        notification_type: str = NotificationType.GENERAL.value,
        data: dict[str, Any] | None = None,
    ) -> None:
        """Send the same notification to many users, in batches."""
        for start in range(0, len(user_ids), BULK_BATCH_SIZE):
            batch = user_ids[start : start + BULK_BATCH_SIZE]
            await asyncio.gather(
                *(self.notify(user_id, title, message, notification_type, data) for user_id in batch)
            )
        logger.info(f"Bulk notification sent to {len(user_ids)} users")

    async def notify_vendor_decision(self, vendor_user_id: UUID, approved: bool, reason: str | None = None) -> None:
        """Tell a vendor whether their application was approved."""
        template = "VENDOR_APPROVED" if approved else "VENDOR_REJECTED"
        await self.notify_template(
            vendor_user_id,
            template,
            {"status": "APPROVED" if approved else "REJECTED", "reason": reason},
        )
