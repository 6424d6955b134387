"""
E-commerce Infrastructure Services

Services que manejan infraestructura técnica del dominio e-commerce:
- Integración con la pasarela de pagos (Razorpay)
- Despacho de notificaciones a clientes y vendedores
"""

from marketplace.domains.ecommerce.infrastructure.services.notification_service import (
    NOTIFICATION_TEMPLATES,
    LoggingNotificationChannel,
    Notification,
    NotificationDispatcher,
    NotificationType,
    WebhookNotificationChannel,
)
from marketplace.domains.ecommerce.infrastructure.services.payment_gateway import (
    RazorpayPaymentGateway,
    compute_signature,
)

__all__ = [
    # Payment gateway
    "RazorpayPaymentGateway",
    "compute_signature",
    # Notifications
    "NotificationDispatcher",
    "Notification",
    "NotificationType",
    "NOTIFICATION_TEMPLATES",
    "LoggingNotificationChannel",
    "WebhookNotificationChannel",
]
